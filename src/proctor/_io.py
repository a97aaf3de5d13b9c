"""Requirement documents on disk and export of grading outcomes."""

from __future__ import annotations

import json
import logging
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, PositiveInt, ValidationError

from ._parser import SourceType
from ._requirements import RequirementSet, StructureRequirement

if TYPE_CHECKING:
    from ._results import GradeOutcome

logger = logging.getLogger(__name__)


class RequirementFileError(Exception):
    """A requirement document could not be read or is invalid."""


class RequirementDocument(BaseModel):
    """Requirements and grading options as written in a TOML file.

    Example:
        ```toml
        recursion_depth = 3
        must = ["VariableDeclaration", "ExpressionStatement"]
        must_not = ["WhileStatement"]

        [[structure]]
        type = "FunctionDeclaration"
        contains = ["ExpressionStatement", "VariableDeclaration"]
        ```

    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    recursion_depth: PositiveInt | None = None
    source_type: SourceType | None = None
    must: tuple[str, ...] = ()
    must_not: tuple[str, ...] = Field(default=(), alias="mustNot")
    structure: tuple[StructureRequirement, ...] = ()

    def to_requirement_set(self) -> RequirementSet:
        return RequirementSet(must=self.must, must_not=self.must_not, structure=self.structure)


def load_requirements_from_toml(path: Path) -> RequirementDocument:
    """Load a requirement document from a TOML file.

    Args:
        path: Path to the TOML file.

    Returns:
        The validated requirement document.

    Raises:
        RequirementFileError: If the file cannot be read, is not valid TOML,
            or does not describe valid requirements.

    """
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        msg = f"Cannot read requirements file {path}: {e}"
        raise RequirementFileError(msg) from e
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {path}: {e}"
        raise RequirementFileError(msg) from e

    try:
        document = RequirementDocument.model_validate(data)
    except ValidationError as e:
        msg = f"Invalid requirements in {path}:\n{e}"
        raise RequirementFileError(msg) from e

    logger.debug(
        "Loaded %d must, %d must-not and %d structure requirement(s) from %s",
        len(document.must),
        len(document.must_not),
        len(document.structure),
        path,
    )
    return document


def results_to_json(outcome: GradeOutcome, *, indent: int | None = 2) -> str:
    """Serialize a grading outcome to JSON."""
    return json.dumps(outcome.to_dict(), indent=indent)


def export_results_to_toml(outcome: GradeOutcome, path: Path) -> None:
    """Write a grading outcome to a TOML file.

    Result sets become ``[[must]]``, ``[[mustNot]]`` and ``[[structure]]``
    arrays of tables; a parse error becomes top-level keys.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as f:
        tomli_w.dump(outcome.to_dict(), f)
    logger.debug("Exported results to %s", path)
