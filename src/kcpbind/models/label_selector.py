"""Kubernetes label selectors and their string syntax."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Optional

OP_IN = "In"
OP_NOT_IN = "NotIn"
OP_EXISTS = "Exists"
OP_DOES_NOT_EXIST = "DoesNotExist"

_NAME_RE = re.compile(r"^([A-Za-z0-9][-A-Za-z0-9_.]*)?[A-Za-z0-9]$")
_DNS_SUBDOMAIN_RE = re.compile(
    r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*$"
)
_SPECIAL = "!=<>(),"
_MAX_NAME_LEN = 63
_MAX_PREFIX_LEN = 253


@dataclass(frozen=True, slots=True)
class LabelSelectorRequirement:
    key: str
    operator: str
    values: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"key": self.key, "operator": self.operator}
        if self.values:
            data["values"] = list(self.values)
        return data


@dataclass(frozen=True, slots=True)
class LabelSelector:
    """
    A label query over a set of resources.

    An empty selector (no labels, no expressions) matches everything.
    """

    match_labels: dict[str, str] = field(default_factory=dict)
    match_expressions: tuple[LabelSelectorRequirement, ...] = ()

    @property
    def is_everything(self) -> bool:
        return not self.match_labels and not self.match_expressions

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.match_labels:
            data["matchLabels"] = dict(self.match_labels)
        if self.match_expressions:
            data["matchExpressions"] = [r.to_dict() for r in self.match_expressions]
        return data

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "LabelSelector":
        data = data or {}
        exprs = tuple(
            LabelSelectorRequirement(
                key=e.get("key", ""),
                operator=e.get("operator", ""),
                values=tuple(e.get("values") or ()),
            )
            for e in data.get("matchExpressions") or []
        )
        return cls(match_labels=dict(data.get("matchLabels") or {}), match_expressions=exprs)


def parse_label_selector(selector: str) -> LabelSelector:
    """
    Parse a selector string such as ``env=prod,tier in (web,api),!legacy``.

    ``=``/``==`` become matchLabels, ``!=`` becomes a NotIn expression and
    ``in``/``notin``/``key``/``!key`` become In/NotIn/Exists/DoesNotExist.
    The empty string yields the match-everything selector.

    Raises:
        ValueError: on a syntax error, an invalid key or value, or an operator
            that has no LabelSelector form (``<``, ``>``).
    """
    tokens = _tokenize(selector)
    if not tokens:
        return LabelSelector()

    parser = _Parser(tokens)
    match_labels: dict[str, str] = {}
    expressions: list[LabelSelectorRequirement] = []

    while True:
        key, op, values = parser.requirement()
        if op in ("=", "=="):
            match_labels[key] = values[0]
        elif op == "!=":
            expressions.append(LabelSelectorRequirement(key, OP_NOT_IN, values))
        elif op == "in":
            expressions.append(LabelSelectorRequirement(key, OP_IN, values))
        elif op == "notin":
            expressions.append(LabelSelectorRequirement(key, OP_NOT_IN, values))
        elif op == "exists":
            expressions.append(LabelSelectorRequirement(key, OP_EXISTS))
        elif op == "!":
            expressions.append(LabelSelectorRequirement(key, OP_DOES_NOT_EXIST))
        else:
            raise ValueError(f"'{op}' is not a valid label selector operator")

        if parser.done():
            break
        parser.expect(",")

    expressions.sort(key=lambda r: r.key)
    return LabelSelector(match_labels=match_labels, match_expressions=tuple(expressions))


def validate_label_key(key: str) -> None:
    prefix, sep, name = key.rpartition("/")
    if sep:
        if not prefix or len(prefix) > _MAX_PREFIX_LEN or not _DNS_SUBDOMAIN_RE.match(prefix):
            raise ValueError(f"invalid label key {key!r}: prefix must be a DNS subdomain")
    if not name or len(name) > _MAX_NAME_LEN or not _NAME_RE.match(name):
        raise ValueError(
            f"invalid label key {key!r}: name part must consist of alphanumeric "
            "characters, '-', '_' or '.', and must start and end with an "
            "alphanumeric character"
        )


def validate_label_value(value: str) -> None:
    if value == "":
        return
    if len(value) > _MAX_NAME_LEN or not _NAME_RE.match(value):
        raise ValueError(
            f"invalid label value {value!r}: must be 63 characters or less and "
            "consist of alphanumeric characters, '-', '_' or '.'"
        )


def _tokenize(selector: str) -> list[str]:
    tokens: list[str] = []
    i = 0
    n = len(selector)
    while i < n:
        ch = selector[i]
        if ch.isspace():
            i += 1
            continue
        if ch in _SPECIAL:
            two = selector[i:i + 2]
            if two in ("==", "!="):
                tokens.append(two)
                i += 2
            else:
                tokens.append(ch)
                i += 1
            continue
        j = i
        while j < n and not selector[j].isspace() and selector[j] not in _SPECIAL:
            j += 1
        tokens.append(selector[i:j])
        i = j
    return tokens


class _Parser:
    def __init__(self, tokens: list[str]) -> None:
        self._tokens = tokens
        self._pos = 0

    def done(self) -> bool:
        return self._pos >= len(self._tokens)

    def peek(self) -> Optional[str]:
        return None if self.done() else self._tokens[self._pos]

    def next(self) -> str:
        tok = self.peek()
        if tok is None:
            raise ValueError("unexpected end of selector")
        self._pos += 1
        return tok

    def expect(self, tok: str) -> None:
        got = self.next()
        if got != tok:
            raise ValueError(f"found '{got}', expected: '{tok}'")

    def requirement(self) -> tuple[str, str, tuple[str, ...]]:
        tok = self.next()
        if tok == "!":
            key = self._identifier()
            validate_label_key(key)
            self._end_of_requirement()
            return key, "!", ()

        key = tok
        if key in _SPECIAL or key in ("==", "!="):
            raise ValueError(f"found '{key}', expected: identifier")
        validate_label_key(key)

        op = self.peek()
        if op is None or op == ",":
            return key, "exists", ()
        self._pos += 1

        if op in ("=", "==", "!="):
            value = ""
            if self.peek() not in (None, ","):
                value = self._identifier()
            validate_label_value(value)
            return key, op, (value,)

        if op in ("in", "notin"):
            values = self._value_set()
            return key, op, values

        if op in ("<", ">"):
            raise ValueError(f"'{op}' is not a valid label selector operator")

        raise ValueError(f"found '{op}', expected: in, notin, =, ==, !=, <, > or ','")

    def _identifier(self) -> str:
        tok = self.next()
        if tok in _SPECIAL or tok in ("==", "!="):
            raise ValueError(f"found '{tok}', expected: identifier")
        return tok

    def _end_of_requirement(self) -> None:
        if self.peek() not in (None, ","):
            raise ValueError(f"found '{self.peek()}', expected: ',' or end of selector")

    def _value_set(self) -> tuple[str, ...]:
        self.expect("(")
        values: set[str] = set()
        while True:
            tok = self.next()
            if tok == ")":
                break
            if tok == ",":
                values.add("")
                continue
            validate_label_value(tok)
            values.add(tok)
            nxt = self.next()
            if nxt == ")":
                break
            if nxt != ",":
                raise ValueError(f"found '{nxt}', expected: ',' or ')'")
        if not values:
            raise ValueError("for 'in', 'notin' operators, values set can't be empty")
        return tuple(sorted(values))
