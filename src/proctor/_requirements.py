"""Requirement data model.

Three categories of requirement are held by a ``RequirementSet``:

- must: node types that must occur in the code,
- must not: node types that must never occur,
- structure: a parent node type whose body must contain other node types,
  possibly nested structure requirements.

Setters replace a whole collection at once. Malformed input is logged and
ignored so the previous, valid collection stays in effect.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ._str_enum_with_doc import StrEnumWithDoc

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)


class RequirementKind(StrEnumWithDoc):
    """Category of a requirement."""

    MUST = "must", "Node types that must occur in the code"
    MUST_NOT = "mustNot", "Node types that must not occur in the code"
    STRUCTURE = "structure", "Parent node types that must contain other node types"


class StructureRequirement(BaseModel):
    """A parent node type that must contain the given entries in its body.

    Entries are node types or nested structure requirements. Each entry is
    satisfied independently by a distinct statement of the parent's body.

    Example:
        >>> StructureRequirement(
        ...     type="FunctionDeclaration",
        ...     contains=["ExpressionStatement", {"type": "ForStatement", "contains": []}],
        ... )

    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    parent_type: str = Field(alias="type", min_length=1)
    contains: tuple[str | StructureRequirement, ...] = ()

    def iter_parent_types(self) -> Iterator[str]:
        """Iterate over the parent types of this requirement and its nested ones."""
        yield self.parent_type
        for entry in self.contains:
            if isinstance(entry, StructureRequirement):
                yield from entry.iter_parent_types()

    def iter_node_types(self) -> Iterator[str]:
        """Iterate over every node type mentioned, including nested ones."""
        yield self.parent_type
        for entry in self.contains:
            if isinstance(entry, StructureRequirement):
                yield from entry.iter_node_types()
            else:
                yield entry


StructureRequirement.model_rebuild()


def _as_type_list(value: object) -> tuple[str, ...] | None:
    if not isinstance(value, (list, tuple)):
        return None
    if not all(isinstance(item, str) for item in value):
        return None
    return tuple(value)


def _as_structure_list(value: object) -> tuple[StructureRequirement, ...] | None:
    if not isinstance(value, (list, tuple)):
        return None
    requirements: list[StructureRequirement] = []
    for item in value:
        if isinstance(item, StructureRequirement):
            requirements.append(item)
        elif isinstance(item, Mapping):
            try:
                requirements.append(StructureRequirement.model_validate(dict(item)))
            except ValidationError as e:
                logger.debug("Invalid structure requirement %r: %s", item, e)
                return None
        else:
            return None
    return tuple(requirements)


class RequirementSet:
    """The must, must-not and structure requirements graded against code.

    Identity of must and must-not entries is positional: listing a type twice
    is two independent demands.
    """

    __slots__ = ("_must", "_must_not", "_structure")

    def __init__(
        self,
        must: Any = (),
        must_not: Any = (),
        structure: Any = (),
    ) -> None:
        self._must: tuple[str, ...] = ()
        self._must_not: tuple[str, ...] = ()
        self._structure: tuple[StructureRequirement, ...] = ()
        self.set_must(must)
        self.set_must_not(must_not)
        self.set_structure(structure)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> RequirementSet:
        """Build a requirement set from a mapping.

        Recognized keys are ``must``, ``mustNot`` (or ``must_not``) and
        ``structure``. Absent keys leave the category empty; malformed values
        are logged and ignored like the setters do.
        """
        requirements = cls()
        if "must" in data:
            requirements.set_must(data["must"])
        for key in ("mustNot", "must_not"):
            if key in data:
                requirements.set_must_not(data[key])
        if "structure" in data:
            requirements.set_structure(data["structure"])
        return requirements

    @property
    def must(self) -> tuple[str, ...]:
        """Node types that must occur."""
        return self._must

    @property
    def must_not(self) -> tuple[str, ...]:
        """Node types that must not occur."""
        return self._must_not

    @property
    def structure(self) -> tuple[StructureRequirement, ...]:
        """Structure requirements."""
        return self._structure

    def set_must(self, requirements: Any) -> tuple[str, ...]:
        """Replace the must requirements and return the current ones."""
        value = _as_type_list(requirements)
        if value is None:
            logger.warning("Ignoring invalid must requirements: %r", requirements)
        else:
            self._must = value
        return self._must

    def set_must_not(self, requirements: Any) -> tuple[str, ...]:
        """Replace the must-not requirements and return the current ones."""
        value = _as_type_list(requirements)
        if value is None:
            logger.warning("Ignoring invalid must-not requirements: %r", requirements)
        else:
            self._must_not = value
        return self._must_not

    def set_structure(self, requirements: Any) -> tuple[StructureRequirement, ...]:
        """Replace the structure requirements and return the current ones."""
        value = _as_structure_list(requirements)
        if value is None:
            logger.warning("Ignoring invalid structure requirements: %r", requirements)
        else:
            self._structure = value
        return self._structure

    def get(self, kind: RequirementKind | str) -> tuple[str, ...] | tuple[StructureRequirement, ...]:
        """Return the requirements of one category."""
        match RequirementKind(kind):
            case RequirementKind.MUST:
                return self._must
            case RequirementKind.MUST_NOT:
                return self._must_not
            case RequirementKind.STRUCTURE:
                return self._structure

    def node_types(self) -> set[str]:
        """Return every node type referenced by any requirement."""
        types = {*self._must, *self._must_not}
        for requirement in self._structure:
            types.update(requirement.iter_node_types())
        return types

    def copy(self) -> RequirementSet:
        """Return an independent set holding the same requirements."""
        return RequirementSet(must=self._must, must_not=self._must_not, structure=self._structure)

    def parent_types(self) -> set[str]:
        """Return every node type a structure requirement looks inside."""
        return {node_type for requirement in self._structure for node_type in requirement.iter_parent_types()}

    @property
    def is_empty(self) -> bool:
        """Whether no requirement of any category is set."""
        return not (self._must or self._must_not or self._structure)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RequirementSet):
            return NotImplemented
        return (self._must, self._must_not, self._structure) == (
            other._must,
            other._must_not,
            other._structure,
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"RequirementSet(must={list(self._must)!r}, must_not={list(self._must_not)!r}, "
            f"structure={list(self._structure)!r})"
        )
