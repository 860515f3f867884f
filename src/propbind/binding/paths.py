"""Path tokenisation and member name normalisation."""

from __future__ import annotations

import re

from .exceptions import InvalidPropertyPathError

SEPARATOR = "."

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")
_SEPARATORS = re.compile(r"[-_]")


def tokenize(key: str) -> tuple[str, ...]:
    """Split a dotted key into its segments.

    Placeholder text such as ``{{committer}}`` is kept verbatim; a dot inside
    a placeholder is not supported.
    """

    if not key:
        msg = "Property key must not be empty"
        raise InvalidPropertyPathError(msg)
    segments = tuple(key.split(SEPARATOR))
    if any(not segment for segment in segments):
        msg = f"Property key {key!r} contains an empty segment"
        raise InvalidPropertyPathError(msg)
    return segments


def to_member_name(name: str) -> str:
    """Return the Python spelling used for case-sensitive matching.

    ``gold-customer`` and ``goldCustomer`` both become ``gold_customer``
    while ``AGE`` is left alone.
    """

    name = name.replace("-", "_")
    return _CAMEL_BOUNDARY.sub(lambda match: "_" + match.group(1).lower(), name)


def canonical_name(name: str) -> str:
    """Return the case-insensitive form of a segment or member name."""

    return _SEPARATORS.sub("", name).casefold()


def strip_prefix(key: str, prefix: str | None, *, ignore_case: bool = False) -> str | None:
    """Return ``key`` without ``prefix`` or ``None`` when it does not match."""

    if not prefix:
        return key
    head = key[: len(prefix)]
    if ignore_case:
        matched = head.casefold() == prefix.casefold()
    else:
        matched = head == prefix
    if not matched:
        return None
    return key[len(prefix) :]


__all__ = ["SEPARATOR", "canonical_name", "strip_prefix", "to_member_name", "tokenize"]
