"""Grading of source code against a requirement set."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ._matcher import DEFAULT_RECURSION_DEPTH, find_types, match_structure, match_types, validate_depth
from ._messages import must_message, must_not_message, structure_message
from ._nodes import DEFAULT_VOCABULARY, unknown_types
from ._parser import SourceSyntaxError, SourceType, make_parser
from ._requirements import RequirementSet
from ._results import ParseError, ResultItem, ResultSet

if TYPE_CHECKING:
    from ._nodes import Node, NodeKind
    from ._parser import Parser
    from ._requirements import StructureRequirement
    from ._results import GradeOutcome

logger = logging.getLogger(__name__)


def evaluate_tree(
    tree: Node,
    requirements: RequirementSet,
    *,
    recursion_depth: int = DEFAULT_RECURSION_DEPTH,
) -> ResultSet:
    """Grade a parsed program against a requirement set.

    Args:
        tree: The ``Program`` node; its children form the depth-1 sequence.
        requirements: The requirements to check.
        recursion_depth: Deepest level searched for matches.

    Returns:
        One result item per requirement, in requirement order.

    Raises:
        ValueError: If ``recursion_depth`` is not a positive integer.

    """
    validate_depth(recursion_depth)
    nodes = tree.children

    found = match_types(requirements.must, nodes, max_depth=recursion_depth)
    must = tuple(
        ResultItem(type=node_type, passed=passed, message=must_message(node_type, passed))
        for node_type, passed in zip(requirements.must, found, strict=True)
    )

    # Absence has no multiplicity: repeated must-not types share one presence check.
    present = find_types(nodes, max_depth=recursion_depth) if requirements.must_not else set()
    must_not = tuple(
        ResultItem(
            type=node_type,
            passed=node_type not in present,
            message=must_not_message(node_type, node_type not in present),
        )
        for node_type in requirements.must_not
    )

    structure = []
    for requirement in requirements.structure:
        passed = match_structure(requirement, nodes, max_depth=recursion_depth)
        structure.append(ResultItem(passed=passed, message=structure_message(requirement, passed)))

    result = ResultSet(must=must, must_not=must_not, structure=tuple(structure))
    logger.debug(
        "Graded %d requirement(s), %d failed",
        len(must) + len(must_not) + len(structure),
        len(result.failures()),
    )
    return result


def evaluate(
    source: str,
    requirements: RequirementSet,
    *,
    recursion_depth: int = DEFAULT_RECURSION_DEPTH,
    parser: Parser | None = None,
    vocabulary: Mapping[str, NodeKind] = DEFAULT_VOCABULARY,
) -> GradeOutcome:
    """Parse and grade source code against a requirement set.

    This is a pure function: the same source, requirements and depth always
    give the same outcome.

    Args:
        source: The source text to grade.
        requirements: The requirements to check.
        recursion_depth: Deepest level searched for matches.
        parser: Parser to use; defaults to parsing JavaScript as a script.
        vocabulary: Node-type vocabulary for the default parser.

    Returns:
        A ``ResultSet``, or a ``ParseError`` if the source could not be parsed.

    Example:
        >>> outcome = evaluate("while (true) {}", RequirementSet(must_not=["WhileStatement"]))
        >>> outcome.must_not[0].message
        'You must not use a while statement'

    """
    parse = parser if parser is not None else make_parser(vocabulary=vocabulary)
    try:
        tree = parse(source)
    except SourceSyntaxError as e:
        logger.debug("Source could not be parsed: %s", e)
        return ParseError.from_exception(e)
    return evaluate_tree(tree, requirements, recursion_depth=recursion_depth)


class Proctor:
    """Grading engine holding one requirement set and recursion depth.

    Instances are independent: each keeps its own copy of the requirement
    set it is given, so engines built from one set never see each other's
    changes. The set may be replaced between gradings but must not be
    mutated while a grading that uses it is running.

    Example:
        >>> proctor = Proctor(RequirementSet(must=["VariableDeclaration"]))
        >>> proctor.grade("var x = 1;").passed
        True

    """

    def __init__(
        self,
        requirements: RequirementSet | None = None,
        *,
        recursion_depth: int = DEFAULT_RECURSION_DEPTH,
        source_type: SourceType | str = SourceType.SCRIPT,
        vocabulary: Mapping[str, NodeKind] = DEFAULT_VOCABULARY,
    ) -> None:
        self._requirements = RequirementSet()
        if requirements is not None:
            self.requirements = requirements
        self._recursion_depth = DEFAULT_RECURSION_DEPTH
        self.recursion_depth = recursion_depth
        self._source_type = SourceType(source_type)
        self._vocabulary = vocabulary
        self._parser = make_parser(source_type=self._source_type, vocabulary=vocabulary)

    @classmethod
    def from_config(
        cls,
        config: Mapping[str, Any],
        *,
        vocabulary: Mapping[str, NodeKind] = DEFAULT_VOCABULARY,
    ) -> Proctor:
        """Create an engine from a configuration mapping.

        Recognized keys: ``must``, ``mustNot`` (or ``must_not``), ``structure``,
        ``recursionDepth`` (or ``recursion_depth``) and ``sourceType`` (or
        ``source_type``). Malformed requirement lists and depths are logged
        and ignored.
        """
        if not isinstance(config, Mapping):
            logger.warning("Ignoring invalid engine configuration: %r", config)
            return cls(vocabulary=vocabulary)

        raw_source_type = config.get("sourceType", config.get("source_type", SourceType.SCRIPT))
        try:
            source_type = SourceType(raw_source_type)
        except ValueError:
            logger.warning("Ignoring invalid source type %r", raw_source_type)
            source_type = SourceType.SCRIPT

        proctor = cls(
            RequirementSet.from_mapping(config),
            source_type=source_type,
            vocabulary=vocabulary,
        )
        for key in ("recursionDepth", "recursion_depth"):
            if key in config:
                proctor.recursion_depth = config[key]
        return proctor

    @property
    def requirements(self) -> RequirementSet:
        """The requirement set graded against."""
        return self._requirements

    @requirements.setter
    def requirements(self, requirements: RequirementSet) -> None:
        if not isinstance(requirements, RequirementSet):
            logger.warning("Ignoring invalid requirement set: %r", requirements)
            return
        self._requirements = requirements.copy()

    @property
    def recursion_depth(self) -> int:
        """Deepest tree level searched for matches (a positive integer)."""
        return self._recursion_depth

    @recursion_depth.setter
    def recursion_depth(self, depth: int) -> None:
        try:
            self._recursion_depth = validate_depth(depth)
        except ValueError:
            logger.warning("Ignoring invalid recursion depth %r, keeping %d", depth, self._recursion_depth)

    @property
    def source_type(self) -> SourceType:
        return self._source_type

    @property
    def vocabulary(self) -> Mapping[str, NodeKind]:
        return self._vocabulary

    def set_must(self, requirements: Any) -> tuple[str, ...]:
        """Replace the must requirements; see ``RequirementSet.set_must``."""
        return self._requirements.set_must(requirements)

    def set_must_not(self, requirements: Any) -> tuple[str, ...]:
        """Replace the must-not requirements; see ``RequirementSet.set_must_not``."""
        return self._requirements.set_must_not(requirements)

    def set_structure(self, requirements: Any) -> tuple[StructureRequirement, ...]:
        """Replace the structure requirements; see ``RequirementSet.set_structure``."""
        return self._requirements.set_structure(requirements)

    def unknown_types(self) -> list[str]:
        """Return requirement node types missing from the vocabulary.

        Such requirements never match: must requirements on them always fail
        and must-not requirements always pass.
        """
        return unknown_types(self._requirements.node_types(), self._vocabulary)

    def grade(self, source: str) -> GradeOutcome:
        """Grade source code against the current requirements.

        Returns:
            A ``ResultSet``, or a ``ParseError`` if the source could not be parsed.

        """
        requirements = self._requirements
        unknown = unknown_types(requirements.node_types(), self._vocabulary)
        if unknown:
            logger.debug("Requirements reference unknown node types: %s", ", ".join(unknown))
        return evaluate(
            source,
            requirements,
            recursion_depth=self._recursion_depth,
            parser=self._parser,
        )

    async def grade_async(self, source: str) -> GradeOutcome:
        """Grade source code in a worker thread.

        Overlapping calls complete in no particular order; callers that
        debounce edits should keep whichever result arrives last.
        """
        return await asyncio.to_thread(self.grade, source)

    def __repr__(self) -> str:
        return (
            f"Proctor(requirements={self._requirements!r}, recursion_depth={self._recursion_depth}, "
            f"source_type={self._source_type.value!r})"
        )
