"""Read-only node model and the node-type vocabulary.

A ``Node`` is the engine's view of one statement in a parsed program: a type
tag taken from the ECMAScript grammar and the ordered statements nested
directly inside it. The vocabulary maps every known type tag to a ``NodeKind``
describing where a node of that kind keeps its nested statements.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Mapping


@dataclass(frozen=True, slots=True)
class Node:
    """A node of a parsed program.

    Attributes:
        type: The grammar type tag, e.g. ``"WhileStatement"``.
        children: The statements nested directly inside this node, in source order.

    """

    type: str
    children: tuple[Node, ...] = ()

    @classmethod
    def of(cls, type_: str, *children: Node) -> Node:
        """Build a node from a type tag and positional children."""
        return cls(type=type_, children=children)

    def walk(self) -> Iterator[Node]:
        """Iterate over this node and all its descendants in pre-order."""
        stack: list[Node] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


class NodeCategory(StrEnum):
    """Grammar category of a node kind."""

    STATEMENT = "statement"
    DECLARATION = "declaration"
    EXPRESSION = "expression"
    CLAUSE = "clause"
    LITERAL = "literal"


@dataclass(frozen=True, slots=True)
class NodeKind:
    """Metadata for one node type tag.

    Attributes:
        name: The type tag.
        category: The grammar category.
        structural: Whether structure requirements can inspect the body of this kind.
        body_fields: Names of the parser fields that hold nested statements.

    """

    name: str
    category: NodeCategory
    structural: bool = False
    body_fields: tuple[str, ...] = ()


FALLBACK_BODY_FIELDS: tuple[str, ...] = ("body",)
"""Fields searched for nested statements on types missing from the vocabulary."""


def _kind(
    name: str,
    category: NodeCategory,
    *body_fields: str,
    structural: bool = False,
) -> tuple[str, NodeKind]:
    return name, NodeKind(name=name, category=category, structural=structural, body_fields=body_fields)


_S = NodeCategory.STATEMENT
_D = NodeCategory.DECLARATION
_E = NodeCategory.EXPRESSION
_C = NodeCategory.CLAUSE
_L = NodeCategory.LITERAL

DEFAULT_VOCABULARY: Mapping[str, NodeKind] = MappingProxyType(
    dict(
        [
            _kind("Program", _S, "body"),
            _kind("Identifier", _L),
            _kind("Literal", _L),
            # Statements
            _kind("ExpressionStatement", _S),
            _kind("BlockStatement", _S, "body", structural=True),
            _kind("EmptyStatement", _S),
            _kind("DebuggerStatement", _S),
            _kind("WithStatement", _S, "body", structural=True),
            _kind("ReturnStatement", _S),
            _kind("LabeledStatement", _S, "body", structural=True),
            _kind("BreakStatement", _S),
            _kind("ContinueStatement", _S),
            _kind("IfStatement", _S, "consequent", "alternate", structural=True),
            _kind("SwitchStatement", _S, "cases", structural=True),
            _kind("SwitchCase", _C, "consequent", structural=True),
            _kind("ThrowStatement", _S),
            _kind("TryStatement", _S, "block", "handler", "finalizer", structural=True),
            _kind("CatchClause", _C, "body", structural=True),
            _kind("WhileStatement", _S, "body", structural=True),
            _kind("DoWhileStatement", _S, "body", structural=True),
            _kind("ForStatement", _S, "body", structural=True),
            _kind("ForInStatement", _S, "body", structural=True),
            _kind("ForOfStatement", _S, "body", structural=True),
            # Declarations
            _kind("FunctionDeclaration", _D, "body", structural=True),
            _kind("VariableDeclaration", _D),
            _kind("ClassDeclaration", _D, "body", structural=True),
            _kind("ClassBody", _C, "body", structural=True),
            _kind("MethodDefinition", _C, "value", structural=True),
            _kind("ImportDeclaration", _D),
            _kind("ExportNamedDeclaration", _D, "declaration", structural=True),
            _kind("ExportDefaultDeclaration", _D, "declaration", structural=True),
            _kind("ExportAllDeclaration", _D),
            # Expressions
            _kind("ThisExpression", _E),
            _kind("ArrayExpression", _E),
            _kind("ObjectExpression", _E),
            _kind("Property", _E),
            _kind("FunctionExpression", _E, "body", structural=True),
            _kind("ArrowFunctionExpression", _E, "body", structural=True),
            _kind("UnaryExpression", _E),
            _kind("UpdateExpression", _E),
            _kind("BinaryExpression", _E),
            _kind("AssignmentExpression", _E),
            _kind("LogicalExpression", _E),
            _kind("MemberExpression", _E),
            _kind("ConditionalExpression", _E),
            _kind("CallExpression", _E),
            _kind("NewExpression", _E),
            _kind("SequenceExpression", _E),
        ],
    ),
)
"""The default node-type vocabulary, read-only."""


def body_fields_for(node_type: str, vocabulary: Mapping[str, NodeKind]) -> tuple[str, ...]:
    """Return the statement-bearing fields for a node type."""
    kind = vocabulary.get(node_type)
    if kind is None:
        return FALLBACK_BODY_FIELDS
    return kind.body_fields


def unknown_types(node_types: Iterable[str], vocabulary: Mapping[str, NodeKind]) -> list[str]:
    """Return the given node types that the vocabulary does not define, sorted."""
    return sorted({node_type for node_type in node_types if node_type not in vocabulary})


def non_structural_types(node_types: Iterable[str], vocabulary: Mapping[str, NodeKind]) -> list[str]:
    """Return the given known node types that hold no nested statements, sorted.

    A structure requirement on such a parent can only pass with an empty ``contains``.
    """
    return sorted(
        {node_type for node_type in node_types if node_type in vocabulary and not vocabulary[node_type].structural},
    )
