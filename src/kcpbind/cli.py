"""``kcp-bind`` command line entry point."""

from __future__ import annotations

import logging
import signal
import threading
from typing import Optional

import click

from kcpbind.auth import KubeconfigInfo
from kcpbind.binder import ComputeBinder
from kcpbind.errors import KcpBindError
from kcpbind.options import DEFAULT_TIMEOUT_SEC, EVERYTHING, BindComputeOptions
from kcpbind.util.time import parse_duration


class DurationType(click.ParamType):
    """Click parameter accepting Go-style durations such as ``30s`` or ``1m``."""

    name = "duration"

    def convert(self, value, param, ctx):
        if isinstance(value, (int, float)):
            return float(value)
        try:
            return parse_duration(value)
        except ValueError as exc:
            self.fail(str(exc), param, ctx)


def _split_csv(ctx, param, values) -> tuple[str, ...]:
    """Allow both ``--opt a --opt b`` and ``--opt a,b``. Parts are kept verbatim."""
    out: list[str] = []
    for value in values or ():
        out.extend(value.split(","))
    return tuple(out)


def _configure_logging(verbose: int) -> None:
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@click.group()
@click.option("--kubeconfig", type=click.Path(dir_okay=False), default=None,
              help="Path to the kubeconfig file (default: $KUBECONFIG or ~/.kube/config).")
@click.option("--context", default=None, help="Kubeconfig context to use.")
@click.option("-v", "--verbose", count=True, help="Increase log verbosity (-v, -vv).")
@click.pass_context
def main(ctx: click.Context, kubeconfig: Optional[str], context: Optional[str], verbose: int) -> None:
    """Bind kcp workspaces to APIs and compute."""
    _configure_logging(verbose)
    ctx.obj = KubeconfigInfo(config_file=kubeconfig, context=context)


@main.command("compute")
@click.argument("location_workspace", required=False)
@click.option("--apiexports", multiple=True, callback=_split_csv,
              help="APIExport to bind to this workspace for workload, each APIExport "
                   "should be in the format of <absolute_ref_to_workspace>:<apiexport>.")
@click.option("--namespace-selector", default=EVERYTHING, show_default=True,
              help="Label select to select namespaces to create workload.")
@click.option("--location-selectors", multiple=True, callback=_split_csv,
              help="A list of label selectors to select locations in the location "
                   "workspace to sync workload.")
@click.option("--name", "placement_name", default=None,
              help="Name of the placement to be created.")
@click.option("--timeout", type=DurationType(), default=f"{int(DEFAULT_TIMEOUT_SEC)}s",
              show_default=True,
              help="Duration to wait for Placement to be created and bound successfully.")
@click.pass_obj
def compute(
    kubeconfig: KubeconfigInfo,
    location_workspace: Optional[str],
    apiexports: tuple[str, ...],
    namespace_selector: str,
    location_selectors: tuple[str, ...],
    placement_name: Optional[str],
    timeout: float,
) -> None:
    """
    Bind the current workspace to compute in LOCATION_WORKSPACE.

    \b
    Examples:
        kcp-bind compute root:locations
        kcp-bind compute root:locations --apiexports root:compute:kubernetes
        kcp-bind compute root:locations --location-selectors region=eu --timeout 2m
    """
    try:
        options = BindComputeOptions.complete(
            [location_workspace] if location_workspace else [],
            api_exports=apiexports,
            namespace_selector=namespace_selector,
            location_selectors=location_selectors,
            name=placement_name,
            timeout=timeout,
        )
    except KcpBindError as exc:
        raise click.UsageError(str(exc)) from exc

    cancel = threading.Event()
    previous = signal.signal(signal.SIGINT, lambda signum, frame: cancel.set())
    try:
        ComputeBinder(kubeconfig, out=click.get_text_stream("stdout")).run(options, cancel=cancel)
    except KcpBindError as exc:
        raise click.ClickException(str(exc)) from exc
    finally:
        signal.signal(signal.SIGINT, previous)


if __name__ == "__main__":
    main()
