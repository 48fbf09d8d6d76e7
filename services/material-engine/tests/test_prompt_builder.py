"""
Unit Tests for the Prompt Assembly Engine

Tests:
1. Prompt modification step function (prepend, append, replace, inject)
2. Stage order of the assembled prompt
3. User input rendering
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from engines.prompt_builder import (
    BASE_PROMPTS,
    PromptAssemblyEngine,
    PromptBuildParams,
    apply_modification,
    apply_modifications,
)
from models.data_models import (
    MaterialSubtype,
    MaterialType,
    ModificationType,
    PromptModification,
    QualityLevel,
)


def _mod(type_, content, target=None):
    return PromptModification(type=type_, content=content, target=target)


@pytest.fixture
def builder():
    return PromptAssemblyEngine()


class TestModifications:

    def test_prepend_and_append_fold_in_order(self):
        mods = [_mod(ModificationType.PREPEND, "Začátek"), _mod(ModificationType.APPEND, "Konec")]
        assert apply_modifications("Základní prompt", mods) == "Začátek\n\nZákladní prompt\n\nKonec"

    def test_later_prepend_wins_the_front(self):
        mods = [_mod(ModificationType.PREPEND, "A"), _mod(ModificationType.PREPEND, "B")]
        assert apply_modifications("P", mods) == "B\n\nA\n\nP"

    def test_replace_is_global_and_case_insensitive(self):
        prompt = "Vytvoř ÚLOHY. Úlohy musí být jasné. úlohy"
        result = apply_modification(prompt, _mod(ModificationType.REPLACE, "otázky", target="úlohy"))
        assert result == "Vytvoř otázky. otázky musí být jasné. otázky"

    def test_replace_target_is_literal(self):
        result = apply_modification("Cena (v Kč): 5", _mod(ModificationType.REPLACE, "€", target="(v Kč)"))
        assert result == "Cena €: 5"

    def test_inject_after_first_occurrence(self):
        prompt = "Vytvoř materiál. Konec promptu."
        mod = _mod(ModificationType.INJECT, "SPECIÁLNÍ POKYN: Přidej obrázky.", target="Vytvoř materiál.")
        assert apply_modification(prompt, mod) == "Vytvoř materiál.\nSPECIÁLNÍ POKYN: Přidej obrázky.\n Konec promptu."

    def test_inject_only_first_occurrence(self):
        mod = _mod(ModificationType.INJECT, "X", target="A")
        assert apply_modification("A A", mod) == "A\nX\n A"

    def test_missing_target_is_noop(self):
        assert apply_modification("Prompt", _mod(ModificationType.INJECT, "X", target="chybí")) == "Prompt"
        assert apply_modification("Prompt", _mod(ModificationType.REPLACE, "X")) == "Prompt"
        assert apply_modification("Prompt", _mod(ModificationType.INJECT, "X", target="")) == "Prompt"


class TestAssembly:

    def test_stage_order(self, builder, sample_analysis):
        subtype = MaterialSubtype(
            id="test",
            name="Test",
            parent_type=MaterialType.WORKSHEET,
            prompt_modifications=[_mod(ModificationType.PREPEND, "PODTYP PRVNÍ")],
        )
        prompt = builder.build_prompt(PromptBuildParams(
            material_type=MaterialType.WORKSHEET,
            user_inputs={"title": "Zlomky"},
            quality_level=QualityLevel.HIGH,
            subtype=subtype,
            assignment=sample_analysis,
            custom_instructions="Použij příklady s pizzou.",
        ))

        assert prompt.startswith("PODTYP PRVNÍ\n\n")
        positions = [
            prompt.index("KONTEXT ZADÁNÍ:"),
            prompt.index(BASE_PROMPTS[MaterialType.WORKSHEET].strip()[:40]),
            prompt.index("POŽADAVKY NA KVALITU (VYSOKÁ):"),
            prompt.index("SPECIFIKACE UŽIVATELE:"),
            prompt.index("DODATEČNÉ POKYNY:"),
            prompt.index("DŮLEŽITÉ PŘIPOMÍNKY:"),
        ]
        assert positions == sorted(positions)
        assert prompt.endswith("ZAČNI GENEROVÁNÍ:\n")

    def test_assignment_context_lists_objectives(self, builder, sample_analysis):
        prompt = builder.add_assignment_context("BASE", sample_analysis)
        assert "- Předmět: matematika" in prompt
        assert "- Obtížnost: základní" in prompt
        assert "- Klíčová témata: zlomky, sčítání" in prompt
        assert "- Sčítat zlomky se stejným jmenovatelem" in prompt
        assert prompt.endswith("\n\nBASE")

    def test_unknown_material_type_uses_generic_prompt(self, builder):
        prompt = builder.get_base_prompt("plakát")
        assert 'typu "plakát"' in prompt

    def test_unknown_quality_level_adds_nothing(self, builder):
        assert builder.add_quality_constraints("P", "nejlepší") == "P"

    def test_no_custom_instructions_section_when_empty(self, builder):
        prompt = builder.build_prompt(PromptBuildParams(material_type=MaterialType.QUIZ, custom_instructions=""))
        assert "DODATEČNÉ POKYNY" not in prompt

    def test_grade_level_in_final_reminders(self, builder):
        with_grade = builder.finalize_prompt("P", {"grade_level": "3. třída"})
        without_grade = builder.finalize_prompt("P", {})
        assert "jazyk pro 3. třída" in with_grade
        assert "jazyk pro daný ročník" in without_grade


class TestUserInputs:

    def test_only_present_inputs_rendered(self, builder):
        section = builder.build_user_input_section(
            {"title": "Zlomky", "subject": "", "question_count": 10, "include_answer_key": False},
            MaterialType.WORKSHEET,
        )
        assert section == "SPECIFIKACE UŽIVATELE:\n- Název: Zlomky\n- Počet úloh: 10\n"

    def test_values_rendered(self, builder):
        section = builder.build_user_input_section(
            {"question_types": ["výběr", "doplňování"], "time_limit": "20 min"},
            MaterialType.QUIZ,
        )
        assert "- Typy otázek: výběr, doplňování\n" in section
        assert "- Časový limit: 20 min\n" in section

    def test_boolean_rendered_in_czech(self, builder):
        section = builder.build_user_input_section({"include_answer_key": True}, MaterialType.WORKSHEET)
        assert "- Zahrnout klíč odpovědí: ano\n" in section

    def test_other_type_fields_ignored(self, builder):
        section = builder.build_user_input_section({"slide_count": 12}, MaterialType.WORKSHEET)
        assert section == "SPECIFIKACE UŽIVATELE:\n"
