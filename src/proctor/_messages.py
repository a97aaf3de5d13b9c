"""Human-readable feedback for requirement results."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from ._requirements import StructureRequirement

if TYPE_CHECKING:
    from collections.abc import Iterable

_CAMEL_BOUNDARY = re.compile(r"([a-z])([A-Z])")
_VOWELS = frozenset("aeiou")


def humanize(node_type: str) -> str:
    """Turn a node type into lower-case words.

    >>> humanize("WhileStatement")
    'while statement'
    """
    return _CAMEL_BOUNDARY.sub(r"\1 \2", node_type).lower()


def article(name: str) -> str:
    """Return ``"an"`` when ``name`` starts with a vowel letter, else ``"a"``."""
    return "an" if name[:1] in _VOWELS else "a"


def with_article(name: str) -> str:
    return f"{article(name)} {name}"


def prose_list(items: Iterable[str]) -> str:
    """Join items as prose: ``a, b and c``.

    A single item is returned as is; no items give an empty string.
    """
    items = list(items)
    if not items:
        return ""
    if len(items) == 1:
        return items[0]
    return f"{', '.join(items[:-1])} and {items[-1]}"


def describe_entry(entry: str | StructureRequirement) -> str:
    """Describe one entry of a structure requirement, with its article."""
    if isinstance(entry, StructureRequirement):
        described = with_article(humanize(entry.parent_type))
        if entry.contains:
            described += f" containing {prose_list(describe_entry(e) for e in entry.contains)}"
        return described
    return with_article(humanize(entry))


def must_message(node_type: str, passed: bool) -> str:  # noqa: FBT001
    name = with_article(humanize(node_type))
    return f"Used {name}" if passed else f"You must use {name}"


def must_not_message(node_type: str, passed: bool) -> str:  # noqa: FBT001
    name = with_article(humanize(node_type))
    return f"You did not use {name}" if passed else f"You must not use {name}"


def structure_message(requirement: StructureRequirement, passed: bool) -> str:  # noqa: FBT001
    """Describe a structure requirement result.

    >>> structure_message(StructureRequirement(type="ForStatement", contains=["ReturnStatement"]), True)
    'The for statement contains a return statement'
    """
    parent = humanize(requirement.parent_type)
    verb = "contains" if passed else "must contain"
    children = prose_list(describe_entry(entry) for entry in requirement.contains)
    return f"The {parent} {verb} {children}".rstrip()
