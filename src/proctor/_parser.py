"""JavaScript parsing on top of ``esprima``.

The engine never looks at esprima's own node objects. ``parse_javascript``
parses the source and converts the statement skeleton of the resulting tree
into immutable ``Node`` values, using the vocabulary to know which fields of
each node hold nested statements.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import StrEnum
from typing import TYPE_CHECKING, Any

import esprima
from esprima.error_handler import Error as EsprimaError

from ._nodes import DEFAULT_VOCABULARY, Node, body_fields_for

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from ._nodes import NodeKind

logger = logging.getLogger(__name__)

Parser = Callable[[str], Node]
"""Parser contract: source text in, ``Program`` node out, ``SourceSyntaxError`` on bad input."""

_BLOCK_STATEMENT = "BlockStatement"


class SourceType(StrEnum):
    """How the source text is parsed."""

    SCRIPT = "script"
    MODULE = "module"


class SourceSyntaxError(Exception):
    """The source text is not valid JavaScript.

    Attributes:
        description: The parser's description of the problem.
        line: 1-based line of the offending token, if known.
        column: 1-based column of the offending token, if known.
        index: 0-based character offset of the offending token, if known.

    """

    def __init__(
        self,
        description: str,
        *,
        line: int | None = None,
        column: int | None = None,
        index: int | None = None,
    ) -> None:
        self.description = description
        self.line = line
        self.column = column
        self.index = index
        location = f"line {line}" if line is not None else "unknown location"
        super().__init__(f"{description} ({location})")


def _statement_children(raw: Any, vocabulary: Mapping[str, NodeKind]) -> list[Any]:
    """Collect the nested statements of an esprima node, in field order.

    A field holding a block contributes the block's statements, so the body
    of ``function f() { ... }`` is the list of statements inside the braces.
    """
    children: list[Any] = []
    for field_name in body_fields_for(raw.type, vocabulary):
        value = getattr(raw, field_name, None)
        if value is None:
            continue
        if isinstance(value, list):
            children.extend(item for item in value if _is_node(item))
        elif _is_node(value):
            if value.type == _BLOCK_STATEMENT:
                children.extend(item for item in value.body if _is_node(item))
            else:
                children.append(value)
    return children


def _is_node(value: Any) -> bool:
    return isinstance(getattr(value, "type", None), str)


def to_node(raw: Any, vocabulary: Mapping[str, NodeKind] = DEFAULT_VOCABULARY) -> Node:
    """Convert an esprima tree into a ``Node`` tree.

    The conversion is iterative so deeply nested programs do not exhaust the
    interpreter stack.

    Args:
        raw: The esprima node to convert (usually the ``Program`` root).
        vocabulary: Node-type vocabulary naming the statement-bearing fields.

    Returns:
        The converted tree.

    """
    # Each frame holds the esprima node, its pending children and the converted ones.
    stack: list[tuple[Any, Iterator[Any], list[Node]]] = [
        (raw, iter(_statement_children(raw, vocabulary)), []),
    ]
    while True:
        current, pending, converted = stack[-1]
        child = next(pending, None)
        if child is not None:
            stack.append((child, iter(_statement_children(child, vocabulary)), []))
            continue
        stack.pop()
        node = Node(type=current.type, children=tuple(converted))
        if not stack:
            return node
        stack[-1][2].append(node)


def parse_javascript(
    source: str,
    *,
    source_type: SourceType | str = SourceType.SCRIPT,
    vocabulary: Mapping[str, NodeKind] = DEFAULT_VOCABULARY,
) -> Node:
    """Parse JavaScript source into a ``Node`` tree rooted at ``Program``.

    Args:
        source: The source text.
        source_type: ``"script"`` or ``"module"`` (modules allow ``import``/``export``).
        vocabulary: Node-type vocabulary naming the statement-bearing fields.

    Returns:
        The ``Program`` node whose children are the top-level statements.

    Raises:
        SourceSyntaxError: If the source is not valid JavaScript.

    """
    source_type = SourceType(source_type)
    parse = esprima.parseModule if source_type is SourceType.MODULE else esprima.parseScript
    try:
        program = parse(source)
    except EsprimaError as e:
        raise SourceSyntaxError(
            getattr(e, "description", None) or str(e),
            line=getattr(e, "lineNumber", None),
            column=getattr(e, "column", None),
            index=getattr(e, "index", None),
        ) from e
    except RecursionError as e:
        # esprima parses by recursive descent, so nesting depth is bounded by the interpreter stack.
        msg = "Source is nested too deeply"
        raise SourceSyntaxError(msg) from e

    tree = to_node(program, vocabulary)
    logger.debug("Parsed %d top-level statement(s)", len(tree.children))
    return tree


def make_parser(
    *,
    source_type: SourceType | str = SourceType.SCRIPT,
    vocabulary: Mapping[str, NodeKind] = DEFAULT_VOCABULARY,
) -> Parser:
    """Return a one-argument parser bound to a source type and vocabulary."""
    source_type = SourceType(source_type)

    def parser(source: str) -> Node:
        return parse_javascript(source, source_type=source_type, vocabulary=vocabulary)

    return parser
