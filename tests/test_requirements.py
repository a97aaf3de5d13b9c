"""Tests for the requirement data model."""

import logging

import pytest
from pydantic import ValidationError

from proctor import RequirementKind, RequirementSet, StructureRequirement


class TestStructureRequirement:
    """Tests for StructureRequirement validation."""

    def test_from_alias(self) -> None:
        requirement = StructureRequirement(type="FunctionDeclaration", contains=["ExpressionStatement"])
        assert requirement.parent_type == "FunctionDeclaration"
        assert requirement.contains == ("ExpressionStatement",)

    def test_from_field_name(self) -> None:
        requirement = StructureRequirement(parent_type="ForStatement")
        assert requirement.parent_type == "ForStatement"
        assert requirement.contains == ()

    def test_nested_mapping_entries(self) -> None:
        requirement = StructureRequirement.model_validate(
            {
                "type": "FunctionDeclaration",
                "contains": [
                    "ExpressionStatement",
                    {"type": "FunctionDeclaration", "contains": ["ReturnStatement"]},
                ],
            },
        )
        nested = requirement.contains[1]
        assert isinstance(nested, StructureRequirement)
        assert nested.parent_type == "FunctionDeclaration"
        assert nested.contains == ("ReturnStatement",)

    def test_empty_type_rejected(self) -> None:
        with pytest.raises(ValidationError):
            StructureRequirement(type="")

    def test_unknown_key_rejected(self) -> None:
        with pytest.raises(ValidationError):
            StructureRequirement.model_validate({"type": "ForStatement", "children": []})

    def test_non_string_entry_rejected(self) -> None:
        with pytest.raises(ValidationError):
            StructureRequirement.model_validate({"type": "ForStatement", "contains": [3]})

    def test_is_frozen(self) -> None:
        requirement = StructureRequirement(type="ForStatement")
        with pytest.raises(ValidationError):
            requirement.parent_type = "WhileStatement"  # type: ignore[misc]

    def test_iter_node_types(self) -> None:
        requirement = StructureRequirement(
            type="FunctionDeclaration",
            contains=["VariableDeclaration", StructureRequirement(type="IfStatement", contains=["ReturnStatement"])],
        )
        assert list(requirement.iter_node_types()) == [
            "FunctionDeclaration",
            "VariableDeclaration",
            "IfStatement",
            "ReturnStatement",
        ]


class TestRequirementSetSetters:
    """Tests for the RequirementSet setters."""

    def test_defaults_are_empty(self) -> None:
        requirements = RequirementSet()
        assert requirements.must == ()
        assert requirements.must_not == ()
        assert requirements.structure == ()
        assert requirements.is_empty

    def test_set_must_replaces_wholesale(self) -> None:
        requirements = RequirementSet(must=["VariableDeclaration"])
        result = requirements.set_must(["ForStatement", "ForStatement"])
        assert result == ("ForStatement", "ForStatement")
        assert requirements.must == ("ForStatement", "ForStatement")

    def test_set_must_not_accepts_tuple(self) -> None:
        requirements = RequirementSet()
        requirements.set_must_not(("WhileStatement",))
        assert requirements.must_not == ("WhileStatement",)

    @pytest.mark.parametrize(
        "invalid",
        [None, "WhileStatement", {"type": "WhileStatement"}, 42, ["WhileStatement", 3], {"WhileStatement"}],
    )
    def test_invalid_must_keeps_previous(self, invalid: object, caplog: pytest.LogCaptureFixture) -> None:
        requirements = RequirementSet(must=["VariableDeclaration"])
        with caplog.at_level(logging.WARNING, logger="proctor._requirements"):
            result = requirements.set_must(invalid)
        assert result == ("VariableDeclaration",)
        assert requirements.must == ("VariableDeclaration",)
        assert "Ignoring invalid must requirements" in caplog.text

    def test_invalid_must_not_keeps_previous(self) -> None:
        requirements = RequirementSet(must_not=["WhileStatement"])
        requirements.set_must_not("ForStatement")
        assert requirements.must_not == ("WhileStatement",)

    def test_set_structure_accepts_mappings(self) -> None:
        requirements = RequirementSet()
        result = requirements.set_structure(
            [{"type": "FunctionDeclaration", "contains": ["ExpressionStatement", "VariableDeclaration"]}],
        )
        assert result == (
            StructureRequirement(type="FunctionDeclaration", contains=["ExpressionStatement", "VariableDeclaration"]),
        )

    def test_set_structure_accepts_models(self) -> None:
        requirement = StructureRequirement(type="ForStatement", contains=["ExpressionStatement"])
        requirements = RequirementSet(structure=[requirement])
        assert requirements.structure == (requirement,)

    @pytest.mark.parametrize(
        "invalid",
        [
            {"type": "ForStatement"},
            "ForStatement",
            ["ForStatement"],
            [{"contains": ["ExpressionStatement"]}],
            [{"type": "ForStatement", "contains": "ExpressionStatement"}],
        ],
    )
    def test_invalid_structure_keeps_previous(self, invalid: object) -> None:
        previous = StructureRequirement(type="WhileStatement")
        requirements = RequirementSet(structure=[previous])
        requirements.set_structure(invalid)
        assert requirements.structure == (previous,)

    def test_one_bad_entry_rejects_whole_list(self) -> None:
        requirements = RequirementSet()
        requirements.set_structure([{"type": "ForStatement"}, {"contains": []}])
        assert requirements.structure == ()

    def test_invalid_constructor_argument_is_ignored(self) -> None:
        requirements = RequirementSet(must="VariableDeclaration")
        assert requirements.must == ()


class TestRequirementSetAccess:
    """Tests for reading a RequirementSet."""

    def test_get_by_kind(self) -> None:
        requirements = RequirementSet(must=["A"], must_not=["B"], structure=[{"type": "C"}])
        assert requirements.get(RequirementKind.MUST) == ("A",)
        assert requirements.get("mustNot") == ("B",)
        assert requirements.get("structure") == (StructureRequirement(type="C"),)

    def test_get_unknown_kind(self) -> None:
        with pytest.raises(ValueError, match="should"):
            RequirementSet().get("should")

    def test_node_types(self) -> None:
        requirements = RequirementSet(
            must=["VariableDeclaration"],
            must_not=["WhileStatement"],
            structure=[{"type": "FunctionDeclaration", "contains": ["ReturnStatement"]}],
        )
        assert requirements.node_types() == {
            "VariableDeclaration",
            "WhileStatement",
            "FunctionDeclaration",
            "ReturnStatement",
        }

    def test_parent_types(self) -> None:
        requirements = RequirementSet(
            must=["VariableDeclaration"],
            structure=[
                {
                    "type": "FunctionDeclaration",
                    "contains": ["ReturnStatement", {"type": "IfStatement", "contains": ["BreakStatement"]}],
                },
            ],
        )
        assert requirements.parent_types() == {"FunctionDeclaration", "IfStatement"}

    def test_copy_is_independent(self) -> None:
        original = RequirementSet(must=["A"], must_not=["B"], structure=[{"type": "C"}])
        duplicate = original.copy()
        assert duplicate == original
        assert duplicate is not original

        duplicate.set_must(["Z"])
        assert original.must == ("A",)

    def test_equality(self) -> None:
        assert RequirementSet(must=["A"]) == RequirementSet(must=("A",))
        assert RequirementSet(must=["A"]) != RequirementSet(must_not=["A"])

    def test_repr(self) -> None:
        assert repr(RequirementSet(must=["A"])) == "RequirementSet(must=['A'], must_not=[], structure=[])"


class TestFromMapping:
    """Tests for RequirementSet.from_mapping."""

    def test_camel_case_keys(self) -> None:
        requirements = RequirementSet.from_mapping(
            {
                "must": ["VariableDeclaration"],
                "mustNot": ["WhileStatement"],
                "structure": [{"type": "ForStatement", "contains": ["ExpressionStatement"]}],
            },
        )
        assert requirements.must == ("VariableDeclaration",)
        assert requirements.must_not == ("WhileStatement",)
        assert requirements.structure[0].parent_type == "ForStatement"

    def test_snake_case_key(self) -> None:
        requirements = RequirementSet.from_mapping({"must_not": ["WhileStatement"]})
        assert requirements.must_not == ("WhileStatement",)

    def test_missing_keys_stay_empty(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="proctor._requirements"):
            requirements = RequirementSet.from_mapping({})
        assert requirements.is_empty
        assert caplog.text == ""

    def test_invalid_values_are_ignored(self) -> None:
        requirements = RequirementSet.from_mapping({"must": "VariableDeclaration", "mustNot": ["WhileStatement"]})
        assert requirements.must == ()
        assert requirements.must_not == ("WhileStatement",)


class TestRequirementKind:
    """Tests for RequirementKind."""

    def test_values(self) -> None:
        assert [kind.value for kind in RequirementKind] == ["must", "mustNot", "structure"]

    def test_descriptions(self) -> None:
        assert RequirementKind.MUST_NOT.description == "Node types that must not occur in the code"
