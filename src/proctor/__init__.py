"""Grade JavaScript source code against structural requirements."""

__all__ = [
    "DEFAULT_RECURSION_DEPTH",
    "DEFAULT_VOCABULARY",
    "GradeOutcome",
    "Node",
    "NodeCategory",
    "NodeKind",
    "ParseError",
    "Parser",
    "Proctor",
    "RequirementDocument",
    "RequirementFileError",
    "RequirementKind",
    "RequirementSet",
    "ResultItem",
    "ResultSet",
    "SourceSyntaxError",
    "SourceType",
    "StrEnumWithDoc",
    "StructureRequirement",
    "evaluate",
    "evaluate_tree",
    "export_results_to_toml",
    "load_requirements_from_toml",
    "parse_javascript",
    "results_to_json",
]

from ._evaluator import Proctor, evaluate, evaluate_tree
from ._io import (
    RequirementDocument,
    RequirementFileError,
    export_results_to_toml,
    load_requirements_from_toml,
    results_to_json,
)
from ._matcher import DEFAULT_RECURSION_DEPTH
from ._nodes import DEFAULT_VOCABULARY, Node, NodeCategory, NodeKind
from ._parser import Parser, SourceSyntaxError, SourceType, parse_javascript
from ._requirements import RequirementKind, RequirementSet, StructureRequirement
from ._results import GradeOutcome, ParseError, ResultItem, ResultSet
from ._str_enum_with_doc import StrEnumWithDoc
