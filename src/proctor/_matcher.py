"""Depth-bounded tree matching.

All searches walk a sequence of sibling nodes (depth 1) and descend into each
node's children at the next depth, left to right and pre-order, never past
``max_depth``. The walk keeps an explicit stack of sibling iterators, so its
memory is bounded by ``max_depth`` regardless of how deep the tree is.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import TYPE_CHECKING

from ._requirements import StructureRequirement

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from ._nodes import Node

logger = logging.getLogger(__name__)

DEFAULT_RECURSION_DEPTH = 3


def validate_depth(max_depth: object) -> int:
    """Return ``max_depth`` if it is a positive integer.

    Raises:
        ValueError: If ``max_depth`` is not a positive integer.

    """
    if isinstance(max_depth, bool) or not isinstance(max_depth, int) or max_depth < 1:
        msg = f"Recursion depth must be a positive integer, got {max_depth!r}"
        raise ValueError(msg)
    return max_depth


def _walk(nodes: Sequence[Node], max_depth: int) -> Iterator[Node]:
    stack: list[tuple[Iterator[Node], int]] = [(iter(nodes), 1)]
    while stack:
        siblings, depth = stack[-1]
        node = next(siblings, None)
        if node is None:
            stack.pop()
            continue
        yield node
        if depth < max_depth and node.children:
            stack.append((iter(node.children), depth + 1))


def iter_nodes(nodes: Sequence[Node], *, max_depth: int) -> Iterator[Node]:
    """Iterate over ``nodes`` and their descendants down to ``max_depth``, pre-order.

    Raises:
        ValueError: If ``max_depth`` is not a positive integer.

    """
    return _walk(nodes, validate_depth(max_depth))


def match_types(
    requirements: Sequence[str],
    nodes: Sequence[Node],
    *,
    max_depth: int,
) -> list[bool]:
    """Match node-type requirements against a tree, consuming each match.

    Nodes are visited in traversal order. Each node satisfies at most one
    requirement: the first not yet satisfied one (in list order) of the same
    type. A satisfied requirement is never matched again, so listing a type
    twice requires two distinct nodes of that type.

    Args:
        requirements: Node types to look for; identity is positional.
        nodes: The root-level sequence to search.
        max_depth: Deepest level to visit; the root-level sequence is depth 1.

    Returns:
        One flag per requirement, True when it was satisfied.

    Raises:
        ValueError: If ``max_depth`` is not a positive integer.

    """
    satisfied = [False] * len(requirements)
    pending: dict[str, deque[int]] = {}
    for index, node_type in enumerate(requirements):
        pending.setdefault(node_type, deque()).append(index)

    remaining = len(requirements)
    for node in iter_nodes(nodes, max_depth=max_depth):
        if remaining == 0:
            break
        waiting = pending.get(node.type)
        if waiting:
            satisfied[waiting.popleft()] = True
            remaining -= 1
    return satisfied


def find_types(nodes: Sequence[Node], *, max_depth: int) -> set[str]:
    """Return the set of node types present down to ``max_depth``."""
    return {node.type for node in iter_nodes(nodes, max_depth=max_depth)}


def _placements(options: Sequence[Sequence[int]], claimed: tuple[int, ...] = ()) -> Iterator[tuple[int, ...]]:
    """Yield every way of giving each nested entry its own statement.

    ``options[i]`` lists the statements entry ``i`` fits on. Placements are
    yielded in order, so the first one takes the earliest fitting statements.
    """
    if len(claimed) == len(options):
        yield claimed
        return
    for index in options[len(claimed)]:
        if index not in claimed:
            yield from _placements(options, (*claimed, index))


def _body_satisfies(parent: Node, contains: Sequence[str | StructureRequirement]) -> bool:
    """Check that the immediate body of ``parent`` satisfies every entry.

    Every entry needs its own statement. Nested structure entries are placed
    first; plain node types are then matched among the statements left over.
    All placements of the nested entries are tried, so a statement that fits
    several entries never blocks a valid assignment.
    """
    body = parent.children
    node_types = [entry for entry in contains if not isinstance(entry, StructureRequirement)]

    options: list[list[int]] = []
    for entry in contains:
        if not isinstance(entry, StructureRequirement):
            continue
        fits = [
            index
            for index, child in enumerate(body)
            if child.type == entry.parent_type and _body_satisfies(child, entry.contains)
        ]
        if not fits:
            return False
        options.append(fits)

    for claimed in _placements(options):
        remaining = [child for index, child in enumerate(body) if index not in claimed]
        if all(match_types(node_types, remaining, max_depth=1)):
            return True
    return False


def match_structure(
    requirement: StructureRequirement,
    nodes: Sequence[Node],
    *,
    max_depth: int,
) -> bool:
    """Check a structure requirement against a tree.

    Candidates are the nodes of ``requirement.parent_type`` found down to
    ``max_depth``. The requirement holds when, for at least one candidate,
    every entry of ``requirement.contains`` is satisfied within that
    candidate's immediate body. Nested structure entries are checked the same
    way, scoped to a statement of that body.

    Raises:
        ValueError: If ``max_depth`` is not a positive integer.

    """
    for candidate in iter_nodes(nodes, max_depth=max_depth):
        if candidate.type != requirement.parent_type:
            continue
        if _body_satisfies(candidate, requirement.contains):
            logger.debug("Structure %s satisfied", requirement.parent_type)
            return True
    return False
