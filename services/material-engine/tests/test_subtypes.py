"""
Unit Tests for the Subtype Registry
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from models.data_models import MaterialSubtype, MaterialType, ModificationType
from templates.subtypes import (
    PREDEFINED_SUBTYPES,
    PRACTICE_PROBLEMS,
    SubtypeRegistry,
    get_subtypes_for_material,
)


@pytest.fixture
def custom_subtype():
    subtype = MaterialSubtype(id="test-escape-room", name="Úniková hra", parent_type=MaterialType.ACTIVITY)
    yield subtype
    SubtypeRegistry._subtypes.pop(subtype.id, None)


class TestPredefinedSubtypes:

    def test_three_per_material_type(self):
        for material_type in MaterialType:
            assert len(get_subtypes_for_material(material_type)) == 3

    def test_ids_are_unique(self):
        ids = [subtype.id for subtype in PREDEFINED_SUBTYPES]
        assert len(ids) == len(set(ids)) == 18

    def test_hints_are_append_modifications(self):
        for subtype in PREDEFINED_SUBTYPES:
            assert subtype.prompt_modifications
            assert all(mod.type == ModificationType.APPEND for mod in subtype.prompt_modifications)

    def test_practice_problems(self):
        assert PRACTICE_PROBLEMS.parent_type == MaterialType.WORKSHEET
        assert [f.name for f in PRACTICE_PROBLEMS.special_fields] == [
            "problemTypes", "scaffoldingLevel", "includeHints",
        ]


class TestSubtypeRegistry:

    def test_get(self):
        assert SubtypeRegistry.get("practice-problems") is PRACTICE_PROBLEMS
        assert SubtypeRegistry.get("neexistuje") is None

    def test_get_by_type_accepts_raw_value(self):
        ids = [s.id for s in SubtypeRegistry.get_by_type("lesson-plan")]
        assert ids == ["introduction-lesson", "practice-lesson", "review-lesson"]

    def test_unknown_type(self):
        assert SubtypeRegistry.get_by_type("plakát") == []

    def test_register(self, custom_subtype):
        SubtypeRegistry.register(custom_subtype)

        assert SubtypeRegistry.get("test-escape-room") is custom_subtype
        assert custom_subtype in get_subtypes_for_material(MaterialType.ACTIVITY)
        assert SubtypeRegistry.list_ids()[-1] == "test-escape-room"
