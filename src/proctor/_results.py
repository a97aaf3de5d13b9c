"""Result models handed to callers and rendering layers.

Serialized shapes keep the field names expected by renderers: ``pass`` for
the outcome of an item and ``mustNot`` for the must-not category.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from ._requirements import RequirementKind

if TYPE_CHECKING:
    from collections.abc import Iterator

    from ._parser import SourceSyntaxError


class ResultItem(BaseModel):
    """Outcome of a single requirement.

    ``type`` is set for must and must-not items and left out for structure items.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: str | None = None
    passed: bool = Field(alias="pass")
    message: str

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ResultSet(BaseModel):
    """Outcome of grading source code against a requirement set."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    must: tuple[ResultItem, ...] = ()
    must_not: tuple[ResultItem, ...] = Field(default=(), alias="mustNot")
    structure: tuple[ResultItem, ...] = ()

    @property
    def passed(self) -> bool:
        """Whether every requirement passed."""
        return all(item.passed for _, item in self.iter_items())

    def get(self, kind: RequirementKind | str) -> tuple[ResultItem, ...]:
        """Return the results of one category (``must``, ``mustNot`` or ``structure``).

        Raises:
            ValueError: If ``kind`` is not a known category.

        """
        match RequirementKind(kind):
            case RequirementKind.MUST:
                return self.must
            case RequirementKind.MUST_NOT:
                return self.must_not
            case RequirementKind.STRUCTURE:
                return self.structure

    def iter_items(self) -> Iterator[tuple[RequirementKind, ResultItem]]:
        """Iterate over all items with their category, in category order."""
        for kind in RequirementKind:
            for item in self.get(kind):
                yield kind, item

    def failures(self) -> list[tuple[RequirementKind, ResultItem]]:
        """Return the items that did not pass."""
        return [(kind, item) for kind, item in self.iter_items() if not item.passed]

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ParseError(BaseModel):
    """Outcome of grading source code that could not be parsed.

    Nothing was graded: no must, must-not or structure results exist.
    """

    model_config = ConfigDict(frozen=True)

    error: Literal["parse"] = "parse"
    message: str
    line: int | None = None
    column: int | None = None
    index: int | None = None

    @property
    def passed(self) -> bool:
        return False

    @classmethod
    def from_exception(cls, exc: SourceSyntaxError) -> ParseError:
        return cls(message=exc.description, line=exc.line, column=exc.column, index=exc.index)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


GradeOutcome = ResultSet | ParseError
