"""Grading Example for proctor.

This example grades a submission from Python instead of the command line:
- Requirements loaded from the exercise TOML file
- Nested structure requirements built in code
- Results printed as JSON, the shape a web frontend consumes

Run it with:
    python examples/grade_submission.py
"""

from pathlib import Path

import proctor as pr

HERE = Path(__file__).parent / "exercise"

# -----------------------------------------------------------------------------
# Requirements
# -----------------------------------------------------------------------------

document = pr.load_requirements_from_toml(HERE / "requirements.toml")
requirements = document.to_requirement_set()

# A function that loops over its input and accumulates inside the loop.
requirements.set_structure(
    [
        *requirements.structure,
        pr.StructureRequirement(
            type="FunctionDeclaration",
            contains=[pr.StructureRequirement(type="ForStatement", contains=["ExpressionStatement"])],
        ),
    ],
)

# -----------------------------------------------------------------------------
# Grading
# -----------------------------------------------------------------------------

proctor = pr.Proctor(
    requirements,
    recursion_depth=document.recursion_depth or pr.DEFAULT_RECURSION_DEPTH,
    source_type=document.source_type or pr.SourceType.SCRIPT,
)
outcome = proctor.grade((HERE / "submission.js").read_text())

print(pr.results_to_json(outcome))  # noqa: T201

if isinstance(outcome, pr.ResultSet):
    for kind, item in outcome.failures():
        print(f"[{kind}] {item.message}")  # noqa: T201
