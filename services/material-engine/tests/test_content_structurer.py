"""
Unit Tests for the Content Structurer

Tests:
1. Question difficulty scoring and ordering
2. Scaffolding strategies per material type
3. Difficulty progression
4. Educational metadata
5. Type-specific content organization
"""

import copy
import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from engines.content_structurer import (
    BASE_DIFFERENTIATION_OPTIONS,
    ContentStructurerEngine,
    assess_question_difficulty,
    sort_by_difficulty,
)
from models.data_models import BloomLevel, LearningStyle, MaterialType, ScaffoldingType
from templates.subtypes import PRACTICE_PROBLEMS


EASY = {"problem": "1 + 1", "type": "multiple_choice"}        # 2.6
MEDIUM = {"problem": "Kolik je 2 + 2?", "type": "short_answer"}  # 4.3
HARD = {"problem": "x**2", "type": "essay"}                    # 6.08

MIXED_CONTENT = {
    "questions": [HARD, {"problem": "1"}, MEDIUM, EASY, HARD],
    "activities": [{"name": "Výklad", "time": "20 min"}],
}

STRATEGY_ORDER = {
    MaterialType.WORKSHEET: [ScaffoldingType.STEP, ScaffoldingType.EXAMPLE, ScaffoldingType.HINT],
    MaterialType.LESSON_PLAN: [ScaffoldingType.REMINDER, ScaffoldingType.CONNECTION],
}


@pytest.fixture
def structurer():
    return ContentStructurerEngine()


class TestQuestionDifficulty:

    def test_components(self):
        # base 1 + length 5/50 + arithmetic
        assert assess_question_difficulty({"problem": "1 + 1"}) == pytest.approx(2.1)
        assert assess_question_difficulty(EASY) == pytest.approx(2.6)
        assert assess_question_difficulty(MEDIUM) == pytest.approx(4.3)
        assert assess_question_difficulty(HARD) == pytest.approx(6.08)

    def test_length_bonus_is_capped(self):
        assert assess_question_difficulty({"problem": "1" * 500}) == pytest.approx(3.0)

    def test_missing_text(self):
        assert assess_question_difficulty({}) == 1.0
        assert assess_question_difficulty("není slovník") == 1.0

    def test_question_key_is_used_when_problem_missing(self):
        assert assess_question_difficulty({"question": "1 + 1"}) == pytest.approx(2.1)

    def test_sort_is_stable(self):
        first = {"problem": "A", "id": 1}
        second = {"problem": "A", "id": 2}
        assert sort_by_difficulty([HARD, first, second, EASY]) == [first, second, EASY, HARD]


class TestScaffolding:

    def test_worksheet_sorted_by_position(self, structurer):
        elements = structurer.add_scaffolding({"questions": [EASY, MEDIUM, HARD]}, MaterialType.WORKSHEET)

        assert [e.type for e in elements[:3]] == [ScaffoldingType.STEP, ScaffoldingType.EXAMPLE, ScaffoldingType.HINT]
        assert [e.position for e in elements] == sorted(e.position for e in elements)
        assert elements[0].target_field == "questions[0]"
        assert elements[1].target_field == "instructions"

    def test_easy_worksheet_gets_nothing(self, structurer):
        assert structurer.add_scaffolding({"questions": [{"problem": "1"}]}, MaterialType.WORKSHEET) == []

    def test_quiz_reminder_at_midpoint(self, structurer):
        elements = structurer.add_scaffolding({"questions": [EASY] * 4}, MaterialType.QUIZ)
        assert len(elements) == 1
        assert elements[0].position == 2
        assert elements[0].target_field == "questions[2]"

    def test_lesson_plan(self, structurer, sample_lesson_plan):
        elements = structurer.add_scaffolding(sample_lesson_plan, MaterialType.LESSON_PLAN)
        assert [e.type for e in elements] == [ScaffoldingType.REMINDER, ScaffoldingType.CONNECTION]

    def test_other_types_get_basic_reminder(self, structurer):
        for material_type in (MaterialType.PROJECT, MaterialType.PRESENTATION, MaterialType.ACTIVITY):
            elements = structurer.add_scaffolding({}, material_type)
            assert [e.type for e in elements] == [ScaffoldingType.REMINDER]

    def test_unknown_type(self, structurer):
        assert structurer.add_scaffolding({"questions": [HARD]}, "plakát") == []

    @pytest.mark.parametrize("material_type", list(MaterialType) + ["plakát"])
    def test_positions_non_decreasing_and_strategy_order_kept(self, structurer, material_type):
        elements = structurer.add_scaffolding(MIXED_CONTENT, material_type)
        positions = [e.position for e in elements]
        assert positions == sorted(positions)

        order = STRATEGY_ORDER.get(material_type, [])
        for previous, current in zip(elements, elements[1:]):
            if previous.position == current.position and previous.type in order and current.type in order:
                assert order.index(previous.type) <= order.index(current.type)

    def test_worksheet_equal_positions_follow_strategies(self, structurer):
        elements = structurer.add_scaffolding(MIXED_CONTENT, MaterialType.WORKSHEET)
        assert [(e.position, e.type) for e in elements] == [
            (0, ScaffoldingType.STEP), (0, ScaffoldingType.EXAMPLE), (0, ScaffoldingType.HINT),
            (2, ScaffoldingType.STEP), (2, ScaffoldingType.HINT),
            (3, ScaffoldingType.STEP), (3, ScaffoldingType.HINT),
            (4, ScaffoldingType.STEP), (4, ScaffoldingType.HINT),
        ]


class TestProgression:

    def test_question_bands(self, structurer):
        levels = structurer.organize_difficulty_progression({"questions": [EASY, HARD]}, MaterialType.QUIZ)
        assert [level.description for level in levels] == ["Základní úroveň", "Střední úroveň", "Pokročilá úroveň"]
        assert levels[0].indicators[0] == "Složitější úlohy"
        assert levels[2].indicators[0] == "Komplexní problémy"

    def test_no_questions(self, structurer):
        assert structurer.organize_difficulty_progression({}, MaterialType.WORKSHEET) == []

    def test_lesson_plan_stages(self, structurer):
        levels = structurer.organize_difficulty_progression({}, MaterialType.LESSON_PLAN)
        assert [level.level for level in levels] == [1, 2, 3]
        assert levels[0].description == "Úvod a motivace"

    def test_basic_two_levels(self, structurer):
        levels = structurer.organize_difficulty_progression({}, MaterialType.PROJECT)
        assert [level.description for level in levels] == ["Základní úroveň", "Pokročilá úroveň"]

    @pytest.mark.parametrize("material_type", [MaterialType.WORKSHEET, MaterialType.QUIZ, MaterialType.LESSON_PLAN])
    def test_repeated_calls_are_identical(self, structurer, material_type):
        content = copy.deepcopy(MIXED_CONTENT)

        first = structurer.organize_difficulty_progression(content, material_type)
        second = structurer.organize_difficulty_progression(content, material_type)

        assert [level.to_dict() for level in first] == [level.to_dict() for level in second]
        assert content == MIXED_CONTENT


class TestMetadata:

    def test_bloom_shares(self, structurer):
        shares = structurer.analyze_bloom_taxonomy("Vypočítajte příklad a vysvětlete postup.")
        assert {share.level: share.percentage for share in shares} == {
            BloomLevel.UNDERSTAND: 0.5,
            BloomLevel.APPLY: 0.5,
        }
        assert shares[0].czech_name == "Porozumění"

    @pytest.mark.parametrize("text", ["Posuďte výsledky pokusu.", "Posouďte výsledky pokusu."])
    def test_evaluate_verb_spellings(self, structurer, text):
        shares = structurer.analyze_bloom_taxonomy(text)
        assert [(share.level, share.percentage) for share in shares] == [(BloomLevel.EVALUATE, 1.0)]

    def test_no_bloom_verbs(self, structurer):
        assert structurer.analyze_bloom_taxonomy("Nic") == []

    def test_learning_styles(self, structurer):
        styles = structurer.analyze_learning_styles("Nakreslete graf a diskutujte o něm.")
        assert [(s.style, s.elements) for s in styles] == [
            (LearningStyle.VISUAL, ["graf"]),
            (LearningStyle.AUDITORY, ["diskutujte"]),
        ]

    def test_prerequisites(self, structurer):
        prerequisites = structurer.identify_prerequisites(
            "Předpokládá se znalost násobilky. Žáci musí umět sčítat."
        )
        assert prerequisites == ["násobilky", "sčítat"]

    def test_cognitive_load_baseline_and_scaffolding_words(self, structurer):
        baseline = structurer.calculate_cognitive_load({"a": "b"}, "b")
        assert (baseline.intrinsic, baseline.extraneous, baseline.germane) == pytest.approx((0.3, 0.2, 0.4))
        assert baseline.overall == pytest.approx(0.3)

        guided = structurer.calculate_cognitive_load({}, "Krok první: abstraktní pojmy")
        assert guided.germane == pytest.approx(0.6)
        assert guided.intrinsic == pytest.approx(0.6)

    def test_type_settings(self, structurer, sample_worksheet):
        metadata = structurer.add_educational_metadata(sample_worksheet, MaterialType.WORKSHEET)
        assert metadata.assessment_type == "Procvičování a upevňování"
        assert metadata.differentiation_options[:5] == list(BASE_DIFFERENTIATION_OPTIONS)
        assert len(metadata.differentiation_options) == 7


class TestOrganization:

    def test_input_is_not_mutated(self, structurer, sample_worksheet):
        before = copy.deepcopy(sample_worksheet)
        result = structurer.structure_content(sample_worksheet, MaterialType.WORKSHEET, PRACTICE_PROBLEMS)
        assert sample_worksheet == before
        assert result.original_content is sample_worksheet

    def test_worksheet_sections_and_practice_sets(self, structurer):
        content = {"title": "T", "questions": [HARD, EASY, MEDIUM]}
        organized = structurer.organize_content(content, MaterialType.WORKSHEET, PRACTICE_PROBLEMS)

        assert organized["questions"] == [EASY, MEDIUM, HARD]
        assert [s["name"] for s in organized["sections"]] == ["Střední úlohy", "Pokročilé úlohy", "Pokročilé úlohy"]
        assert organized["sections"][0]["instructions"].startswith("Tato sekce obsahuje 1 úloh.")
        assert [q["problem"] for q in organized["warmUp"]] == [
            "Rozehřívací úloha: 1 + 1", "Rozehřívací úloha: Kolik je 2 + 2?",
        ]
        assert organized["bonus"][-1]["problem"] == "Bonusová úloha: x**2"
        assert organized["bonus"][-1]["difficulty"] == "challenging"

    def test_worksheet_without_subtype_has_no_practice_sets(self, structurer):
        organized = structurer.organize_content({"questions": [EASY]}, MaterialType.WORKSHEET)
        assert "warmUp" not in organized

    def test_lesson_plan_keeps_existing_intro(self, structurer, sample_lesson_plan):
        organized = structurer.organize_content(sample_lesson_plan, MaterialType.LESSON_PLAN)
        assert len(organized["activities"]) == 3
        assert organized["transitions"][0].startswith('Přechod z "Úvod a motivace" do "Výklad"')
        assert organized["differentiation"].startswith("\n\nDodatečné možnosti diferenciace:")

    def test_lesson_plan_gets_intro(self, structurer):
        organized = structurer.organize_content(
            {"activities": [{"name": "Výklad", "time": "20 min"}], "differentiation": "Pracovní listy A/B"},
            MaterialType.LESSON_PLAN,
        )
        assert organized["activities"][0]["name"] == "Úvod a motivace"
        assert organized["activities"][0]["time"] == "5 min"
        assert len(organized["transitions"]) == 1
        assert organized["differentiation"].startswith("Pracovní listy A/B\n\n")

    def test_quiz_grouping_and_scoring(self, structurer):
        questions = [
            {"question": "Delší otázka s výběrem?", "type": "multiple_choice"},
            {"question": "Esej", "type": "essay"},
            {"question": "A?", "type": "multiple_choice"},
            {"question": "Bez typu"},
        ]
        organized = structurer.organize_content({"questions": questions}, MaterialType.QUIZ)

        assert [q["question"] for q in organized["questions"]] == [
            "A?", "Delší otázka s výběrem?", "Esej", "Bez typu",
        ]
        assert organized["scoringGuide"] == {
            "totalPoints": 4,
            "passingScore": 3,
            "excellentScore": 4,
            "timePerQuestion": "2-3 minuty",
            "instructions": "Každá správná odpověď = 1 bod",
        }
        assert "4 úloh" in organized["sectionInstructions"]

    def test_project_rubric_and_timeline(self, structurer):
        content = {
            "title": "Voda",
            "rubric": [{"criteria": "Kvalita zpracování"}, {"criteria": "Prezentace"}],
        }
        organized = structurer.organize_content(content, MaterialType.PROJECT)

        assert [item["weight"] for item in organized["rubric"]] == [0.3, 0.2]
        assert organized["rubric"][1]["descriptors"][0] == "Výborně (4): Prezentace splněno na vysoké úrovni"
        assert len(organized["phases"]) == 3
        assert organized["timeline"]["totalDuration"] == "4 týdny"
        assert len(organized["timeline"]["milestones"]) == 4

    def test_presentation_enhancements(self, structurer):
        content = {"slides": [
            {"heading": "Graf růstu", "bullets": ["a", "b", "c"]},
            {"heading": "Shrnutí"},
        ]}
        organized = structurer.organize_content(content, MaterialType.PRESENTATION)
        first, last = organized["slides"]

        assert first["slideNumber"] == 1
        assert first["estimatedTime"] == "2 min"
        assert first["visualSuggestions"] == "Graf nebo tabulka"
        assert last["estimatedTime"] == "1 min"
        assert last["transitionSuggestion"] == "Závěrečné shrnutí"
        assert organized["speakerNotes"][1] == "Slide 2: Shrnutí\nKlíčové body k vysvětlení: Rozveďte téma podle obsahu"
        assert len(organized["visualSuggestions"]) == 2

    def test_activity_phases_and_safety(self, structurer):
        content = {
            "goal": "Vyrobit model",
            "instructions": ["1", "2", "3", "4", "5"],
            "materials": ["papír", "nůžky"],
        }
        organized = structurer.organize_content(content, MaterialType.ACTIVITY)

        assert organized["structuredInstructions"] == {
            "preparation": ["1", "2"],
            "execution": ["3", "4"],
            "conclusion": ["5"],
        }
        assert "Opatrně zacházejte s ostrými předměty" in organized["safetyNotes"]
        assert "Používejte ochranné pomůcky" not in organized["safetyNotes"]
        assert len(organized["assessmentCriteria"]) == 5

    def test_non_dict_content_passes_through(self, structurer):
        result = structurer.structure_content("jen text", MaterialType.WORKSHEET)
        assert result.structured_content == "jen text"
        assert result.scaffolding == []
        assert result.difficulty_progression == []
