"""
Content Structurer Engine

Enriches generated material with scaffolding, a difficulty progression,
a reorganized copy of the content and educational metadata.

The input content is never mutated: reorganization works on a deep copy
and the original is passed through untouched.
"""

import copy
import json
import math
import re
from typing import Any, Callable, Dict, List, Optional, Pattern, Tuple

from models.data_models import (
    BLOOM_CZECH_NAMES,
    LEARNING_STYLE_CZECH_NAMES,
    BloomLevelShare,
    CognitiveLoad,
    EducationalMetadata,
    LearningStyleMatch,
    MaterialSubtype,
    MaterialType,
    ProgressionLevel,
    ScaffoldingElement,
    ScaffoldingType,
    StructuredContent,
)
from config.settings import get_config_for_material_type
from engines.text_heuristics import (
    BLOOM_VERBS,
    LEARNING_STYLE_INDICATORS,
    contains_any,
    flatten_text,
    matched_keywords,
)
from utils.lenient_json import as_dict, as_list, get_text


_ARITHMETIC = re.compile(r"\d+\s*[+\-*/]\s*\d+")
_LOWERCASE = re.compile(r"[a-z]")
_POWER = re.compile(r"\^|\*\*")

QUESTION_TYPE_BONUS: Dict[str, float] = {
    "multiple_choice": 0.5,
    "short_answer": 1.0,
    "essay": 2.0,
}

STEP_SCAFFOLD = (
    "Krok za krokem: 1) Přečtěte si zadání pozorně 2) Identifikujte známé údaje "
    "3) Určete, co hledáte 4) Vyberte vhodný postup"
)
EXAMPLE_SCAFFOLD = (
    "Příklad řešení: Pro řešení této úlohy postupujte následovně: 1) Analyzujte zadání, "
    "2) Identifikujte známé hodnoty, 3) Aplikujte vhodný vzorec nebo postup."
)
HINT_SCAFFOLD = "Nápověda: Rozdělte úlohu na menší kroky a řešte postupně."
ACTIVATION_SCAFFOLD = "Aktivační otázky: Co už víte o tomto tématu? Kde jste se s tím setkali?"
CONNECTION_SCAFFOLD = "Propojení: Připomeňte si předchozí hodinu a najděte souvislosti s novým učivem"
PROGRESSIVE_SCAFFOLD = "Pokud máte potíže, vraťte se k jednodušším úlohám a postupujte krok za krokem"
BASIC_SCAFFOLD = "Nezapomeňte si průběžně kontrolovat svou práci a ptát se, pokud něčemu nerozumíte"

BASE_DIFFERENTIATION_OPTIONS: Tuple[str, ...] = (
    "Různé úrovně obtížnosti úloh",
    "Volba způsobu prezentace výsledků",
    "Skupinová vs. individuální práce",
    "Dodatečný čas pro pomalejší žáky",
    "Rozšiřující úlohy pro rychlejší žáky",
)

PROGRESSION_LABELS = ("Základní úroveň", "Střední úroveň", "Pokročilá úroveň")

LESSON_PROGRESSION: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("Úvod a motivace", ("Aktivace předchozích znalostí", "Představení nového tématu")),
    ("Výklad a procvičování", ("Vysvětlení nových konceptů", "Řízené procvičování")),
    ("Aplikace a syntéza", ("Samostatná práce", "Aplikace v nových situacích")),
)

BASIC_PROGRESSION: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("Základní úroveň", ("Jednoduché koncepty", "Přímá aplikace")),
    ("Pokročilá úroveň", ("Složitější úlohy", "Kombinace konceptů")),
)

_PREREQUISITE_PATTERNS: Tuple[Pattern, ...] = (
    re.compile(r"znalost\s+([^.!?]+)", re.IGNORECASE),
    re.compile(r"umět\s+([^.!?]+)", re.IGNORECASE),
    re.compile(r"předchozí\s+([^.!?]+)", re.IGNORECASE),
    re.compile(r"základy\s+([^.!?]+)", re.IGNORECASE),
)
MAX_PREREQUISITES = 5

COMPLEX_CONCEPT_WORDS = ("abstraktní", "teoretický", "komplexní", "systematický", "analytický")
DISTRACTION_WORDS = ("pozor", "upozornění", "varování")
SCAFFOLDING_WORDS = ("krok", "postup", "nápověda", "příklad", "tip")
CONNECTION_WORDS = ("souvisí", "navazuje", "propojení", "vztah", "podobně")

IMPORTANT_CRITERIA_WORDS = ("kvalita", "originalita", "přesnost", "úplnost")

LESSON_INTRO_ACTIVITY = {
    "name": "Úvod a motivace",
    "description": "Aktivace předchozích znalostí a představení tématu",
    "time": "5 min",
    "steps": ["Přivítání žáků", "Připomenutí předchozí hodiny", "Představení cílů"],
}

DIFFERENTIATION_APPENDIX = (
    "\n\nDodatečné možnosti diferenciace:"
    "\n- Pro pokročilé žáky: rozšiřující úlohy a samostatné projekty"
    "\n- Pro žáky s obtížemi: dodatečná podpora a zjednodušené úlohy"
    "\n- Skupinová práce s různými rolemi podle schopností"
)

PROJECT_PHASES = (
    {
        "name": "Přípravná fáze",
        "duration": "1 týden",
        "activities": ["Výběr tématu", "Plánování postupu", "Shromažďování zdrojů"],
    },
    {
        "name": "Realizační fáze",
        "duration": "2-3 týdny",
        "activities": ["Výzkum a sběr dat", "Analýza informací", "Tvorba výstupů"],
    },
    {
        "name": "Prezentační fáze",
        "duration": "1 týden",
        "activities": ["Příprava prezentace", "Prezentování výsledků", "Reflexe a hodnocení"],
    },
)

PROJECT_MILESTONES = (
    {"week": 1, "task": "Výběr tématu a plán"},
    {"week": 2, "task": "Výzkum a sběr dat"},
    {"week": 3, "task": "Analýza a tvorba"},
    {"week": 4, "task": "Prezentace a hodnocení"},
)

ACTIVITY_ASSESSMENT = (
    "Aktivní účast v činnosti",
    "Dodržování pokynů",
    "Kvalita výsledků",
    "Spolupráce ve skupině",
    "Reflexe a zhodnocení",
)


# ============================================================================
# Question difficulty
# ============================================================================

def assess_question_difficulty(question: Any) -> float:
    """
    Syntactic difficulty proxy for one question.

    1.0 base, up to +2 for text length (100 chars), +1 arithmetic,
    +1 lowercase letter, +2 power notation, plus a question-type bonus.
    """
    question = as_dict(question)
    text = get_text(question, "problem", "question")

    difficulty = 1.0
    difficulty += min(2.0, len(text) / 50)
    if _ARITHMETIC.search(text):
        difficulty += 1
    if _LOWERCASE.search(text):
        difficulty += 1
    if _POWER.search(text):
        difficulty += 2

    question_type = question.get("type")
    if isinstance(question_type, str):
        difficulty += QUESTION_TYPE_BONUS.get(question_type, 0.0)
    return difficulty


def difficulty_indicators(difficulty: float) -> List[str]:
    if difficulty < 2:
        return ["Jednoduché výpočty", "Základní koncepty", "Přímá aplikace"]
    if difficulty < 3:
        return ["Složitější úlohy", "Kombinace postupů", "Analýza problému"]
    return ["Komplexní problémy", "Kritické myšlení", "Syntéza informací"]


def sort_by_difficulty(questions: List[Any]) -> List[Any]:
    """Stable ascending sort by difficulty score."""
    return sorted(questions, key=assess_question_difficulty)


# ============================================================================
# Scaffolding strategies
# ============================================================================

def step_by_step_scaffolding(content: Dict[str, Any]) -> List[ScaffoldingElement]:
    return [
        ScaffoldingElement(ScaffoldingType.STEP, STEP_SCAFFOLD, index, f"questions[{index}]")
        for index, question in enumerate(as_list(content.get("questions")))
        if assess_question_difficulty(question) > 2
    ]


def example_scaffolding(content: Dict[str, Any]) -> List[ScaffoldingElement]:
    questions = as_list(content.get("questions"))
    if any(assess_question_difficulty(q) > 2.5 for q in questions):
        return [ScaffoldingElement(ScaffoldingType.EXAMPLE, EXAMPLE_SCAFFOLD, 0, "instructions")]
    return []


def hint_scaffolding(content: Dict[str, Any]) -> List[ScaffoldingElement]:
    return [
        ScaffoldingElement(ScaffoldingType.HINT, HINT_SCAFFOLD, index, f"questions[{index}]")
        for index, question in enumerate(as_list(content.get("questions")))
        if assess_question_difficulty(question) > 2.5
    ]


def activation_scaffolding(content: Dict[str, Any]) -> List[ScaffoldingElement]:
    if isinstance(content.get("activities"), list):
        return [ScaffoldingElement(ScaffoldingType.REMINDER, ACTIVATION_SCAFFOLD, 0, "activities[0]")]
    return []


def connection_scaffolding(content: Dict[str, Any]) -> List[ScaffoldingElement]:
    return [ScaffoldingElement(ScaffoldingType.CONNECTION, CONNECTION_SCAFFOLD, 0, "objectives")]


def progressive_scaffolding(content: Dict[str, Any]) -> List[ScaffoldingElement]:
    questions = content.get("questions")
    if not isinstance(questions, list):
        return []
    mid_point = len(questions) // 2
    return [
        ScaffoldingElement(ScaffoldingType.REMINDER, PROGRESSIVE_SCAFFOLD, mid_point, f"questions[{mid_point}]")
    ]


def basic_scaffolding(content: Dict[str, Any]) -> List[ScaffoldingElement]:
    return [ScaffoldingElement(ScaffoldingType.REMINDER, BASIC_SCAFFOLD, 0, "instructions")]


ScaffoldingStrategy = Callable[[Dict[str, Any]], List[ScaffoldingElement]]

SCAFFOLDING_STRATEGIES: Dict[MaterialType, Tuple[ScaffoldingStrategy, ...]] = {
    MaterialType.WORKSHEET: (step_by_step_scaffolding, example_scaffolding, hint_scaffolding),
    MaterialType.LESSON_PLAN: (activation_scaffolding, connection_scaffolding),
    MaterialType.QUIZ: (progressive_scaffolding,),
    MaterialType.PROJECT: (basic_scaffolding,),
    MaterialType.PRESENTATION: (basic_scaffolding,),
    MaterialType.ACTIVITY: (basic_scaffolding,),
}


class ContentStructurerEngine:
    """
    Structures generated teaching material.

    Every public method tolerates missing or malformed fields and never
    raises; non-dict content is treated as empty.
    """

    def __init__(self):
        self._organizers: Dict[MaterialType, Callable[[Dict[str, Any], Optional[MaterialSubtype]], Dict[str, Any]]] = {
            MaterialType.WORKSHEET: self._organize_worksheet,
            MaterialType.LESSON_PLAN: self._organize_lesson_plan,
            MaterialType.QUIZ: self._organize_quiz,
            MaterialType.PROJECT: self._organize_project,
            MaterialType.PRESENTATION: self._organize_presentation,
            MaterialType.ACTIVITY: self._organize_activity,
        }

    def structure_content(
        self,
        content: Any,
        material_type: Any,
        subtype: Optional[MaterialSubtype] = None,
    ) -> StructuredContent:
        return StructuredContent(
            original_content=content,
            structured_content=self.organize_content(content, material_type, subtype),
            scaffolding=self.add_scaffolding(content, material_type),
            difficulty_progression=self.organize_difficulty_progression(content, material_type),
            educational_metadata=self.add_educational_metadata(content, material_type),
        )

    # ------------------------------------------------------------------
    # Scaffolding
    # ------------------------------------------------------------------

    def add_scaffolding(self, content: Any, material_type: Any) -> List[ScaffoldingElement]:
        """All strategy outputs, stably sorted by position."""
        content = as_dict(content)
        strategies = SCAFFOLDING_STRATEGIES.get(MaterialType.parse(material_type), ())
        elements: List[ScaffoldingElement] = []
        for strategy in strategies:
            elements.extend(strategy(content))
        return sorted(elements, key=lambda element: element.position)

    # ------------------------------------------------------------------
    # Difficulty progression
    # ------------------------------------------------------------------

    def organize_difficulty_progression(self, content: Any, material_type: Any) -> List[ProgressionLevel]:
        content = as_dict(content)
        parsed = MaterialType.parse(material_type)

        if parsed in (MaterialType.WORKSHEET, MaterialType.QUIZ):
            return self._question_progression(as_list(content.get("questions")))
        if parsed == MaterialType.LESSON_PLAN:
            return self._fixed_progression(LESSON_PROGRESSION)
        return self._fixed_progression(BASIC_PROGRESSION)

    @staticmethod
    def _question_progression(questions: List[Any]) -> List[ProgressionLevel]:
        if not questions:
            return []
        difficulties = [assess_question_difficulty(q) for q in questions]
        low, high = min(difficulties), max(difficulties)
        span = high - low
        return [
            ProgressionLevel(
                level=i + 1,
                description=label,
                indicators=difficulty_indicators(low + span * i / 2),
            )
            for i, label in enumerate(PROGRESSION_LABELS)
        ]

    @staticmethod
    def _fixed_progression(stages: Tuple[Tuple[str, Tuple[str, ...]], ...]) -> List[ProgressionLevel]:
        return [
            ProgressionLevel(level=i + 1, description=description, indicators=list(indicators))
            for i, (description, indicators) in enumerate(stages)
        ]

    # ------------------------------------------------------------------
    # Educational metadata
    # ------------------------------------------------------------------

    def add_educational_metadata(self, content: Any, material_type: Any) -> EducationalMetadata:
        text = flatten_text(content)
        type_config = get_config_for_material_type(material_type)

        return EducationalMetadata(
            blooms_taxonomy_levels=self.analyze_bloom_taxonomy(text),
            learning_styles=self.analyze_learning_styles(text),
            assessment_type=type_config.assessment_type,
            differentiation_options=list(BASE_DIFFERENTIATION_OPTIONS) + list(type_config.differentiation_extras),
            prerequisite_knowledge=self.identify_prerequisites(text),
            cognitive_load=self.calculate_cognitive_load(content, text),
        )

    @staticmethod
    def analyze_bloom_taxonomy(text: str) -> List[BloomLevelShare]:
        """Share of matched verbs per Bloom level; unmatched levels are omitted."""
        counts = {level: len(matched_keywords(text, verbs)) for level, verbs in BLOOM_VERBS.items()}
        total = sum(counts.values())
        if total == 0:
            return []
        return [
            BloomLevelShare(level=level, czech_name=BLOOM_CZECH_NAMES[level], percentage=count / total)
            for level, count in counts.items()
            if count > 0
        ]

    @staticmethod
    def analyze_learning_styles(text: str) -> List[LearningStyleMatch]:
        styles: List[LearningStyleMatch] = []
        for style, indicators in LEARNING_STYLE_INDICATORS.items():
            elements = matched_keywords(text, indicators)
            if elements:
                styles.append(LearningStyleMatch(style, LEARNING_STYLE_CZECH_NAMES[style], elements))
        return styles

    @staticmethod
    def identify_prerequisites(text: str) -> List[str]:
        prerequisites: List[str] = []
        for pattern in _PREREQUISITE_PATTERNS:
            for match in pattern.finditer(text):
                phrase = match.group(1).strip()
                if phrase and phrase not in prerequisites:
                    prerequisites.append(phrase)
        return prerequisites[:MAX_PREREQUISITES]

    @staticmethod
    def calculate_cognitive_load(content: Any, text: str) -> CognitiveLoad:
        intrinsic = 0.3
        if len(text) > 1000:
            intrinsic += 0.2
        if contains_any(text, COMPLEX_CONCEPT_WORDS):
            intrinsic += 0.3

        extraneous = 0.2
        serialized = json.dumps(content, ensure_ascii=False, default=str, skipkeys=True)
        if len(serialized) > 2000 or serialized.count("{") > 10:
            extraneous += 0.2
        if contains_any(text, DISTRACTION_WORDS):
            extraneous += 0.1

        germane = 0.4
        if contains_any(text, SCAFFOLDING_WORDS):
            germane += 0.2
        if contains_any(text, CONNECTION_WORDS):
            germane += 0.1

        intrinsic, extraneous, germane = min(1.0, intrinsic), min(1.0, extraneous), min(1.0, germane)
        return CognitiveLoad(
            intrinsic=intrinsic,
            extraneous=extraneous,
            germane=germane,
            overall=min(1.0, (intrinsic + extraneous + germane) / 3),
        )

    # ------------------------------------------------------------------
    # Content organization
    # ------------------------------------------------------------------

    def organize_content(self, content: Any, material_type: Any, subtype: Optional[MaterialSubtype] = None) -> Any:
        """Type-specific reorganized deep copy of content."""
        organized = copy.deepcopy(content)
        if not isinstance(organized, dict):
            return organized
        organizer = self._organizers.get(MaterialType.parse(material_type))
        if organizer is None:
            return organized
        return organizer(organized, subtype)

    def _organize_worksheet(self, content: Dict[str, Any], subtype: Optional[MaterialSubtype]) -> Dict[str, Any]:
        questions = content.get("questions")
        if not isinstance(questions, list):
            return content

        questions = sort_by_difficulty(questions)
        content["questions"] = questions
        content["sections"] = self._worksheet_sections(questions)

        if subtype is not None and subtype.id == "practice-problems":
            content["warmUp"] = [
                self._relabel(q, "Rozehřívací úloha: ", "easy") for q in questions[:2]
            ]
            content["bonus"] = [
                self._relabel(q, "Bonusová úloha: ", "challenging") for q in questions[-2:]
            ]
        return content

    @staticmethod
    def _section_instructions(questions: List[Any]) -> str:
        return (
            f"Tato sekce obsahuje {len(questions)} úloh. "
            "Řešte postupně a nezapomeňte kontrolovat své odpovědi."
        )

    def _worksheet_sections(self, questions: List[Any]) -> List[Dict[str, Any]]:
        if not questions:
            return []
        per_section = math.ceil(len(questions) / 3)
        sections = []
        for start in range(0, len(questions), per_section):
            chunk = questions[start:start + per_section]
            average = sum(assess_question_difficulty(q) for q in chunk) / len(chunk)
            if average > 3:
                name = "Pokročilé úlohy"
            elif average > 2:
                name = "Střední úlohy"
            else:
                name = "Základní úlohy"
            sections.append({
                "name": name,
                "questions": chunk,
                "instructions": self._section_instructions(chunk),
            })
        return sections

    @staticmethod
    def _relabel(question: Any, prefix: str, difficulty: str) -> Dict[str, Any]:
        relabeled = dict(as_dict(question))
        relabeled["problem"] = f"{prefix}{get_text(relabeled, 'problem', 'question')}"
        relabeled["difficulty"] = difficulty
        return relabeled

    def _organize_lesson_plan(self, content: Dict[str, Any], subtype: Optional[MaterialSubtype]) -> Dict[str, Any]:
        activities = content.get("activities")
        if not isinstance(activities, list):
            return content

        activities = list(activities)
        if activities and "úvod" not in get_text(activities[0], "name").lower():
            activities.insert(0, copy.deepcopy(LESSON_INTRO_ACTIVITY))
        content["activities"] = activities

        names = [get_text(activity, "name") for activity in activities]
        content["transitions"] = [
            f'Přechod z "{current}" do "{following}": '
            "Shrňte klíčové body a připravte žáky na další aktivitu."
            for current, following in zip(names, names[1:])
        ]

        existing = content.get("differentiation")
        content["differentiation"] = (existing if isinstance(existing, str) else "") + DIFFERENTIATION_APPENDIX
        return content

    def _organize_quiz(self, content: Dict[str, Any], subtype: Optional[MaterialSubtype]) -> Dict[str, Any]:
        questions = content.get("questions")
        if not isinstance(questions, list):
            return content

        groups: Dict[str, List[Any]] = {}
        for question in questions:
            question_type = as_dict(question).get("type") or "other"
            groups.setdefault(str(question_type), []).append(question)

        organized: List[Any] = []
        for group in groups.values():
            organized.extend(sort_by_difficulty(group))

        total = len(organized)
        content["questions"] = organized
        content["sectionInstructions"] = self._section_instructions(organized)
        content["scoringGuide"] = {
            "totalPoints": total,
            "passingScore": math.ceil(total * 0.6),
            "excellentScore": math.ceil(total * 0.9),
            "timePerQuestion": "2-3 minuty",
            "instructions": "Každá správná odpověď = 1 bod",
        }
        return content

    def _organize_project(self, content: Dict[str, Any], subtype: Optional[MaterialSubtype]) -> Dict[str, Any]:
        content["phases"] = copy.deepcopy(list(PROJECT_PHASES))

        rubric = content.get("rubric")
        if isinstance(rubric, list):
            content["rubric"] = [self._enhance_rubric_item(item) for item in rubric]

        content["timeline"] = {
            "totalDuration": content.get("duration") or "4 týdny",
            "milestones": copy.deepcopy(list(PROJECT_MILESTONES)),
        }
        return content

    @staticmethod
    def _enhance_rubric_item(item: Any) -> Dict[str, Any]:
        enhanced = dict(as_dict(item))
        criteria = get_text(enhanced, "criteria")
        enhanced["weight"] = 0.3 if contains_any(criteria, IMPORTANT_CRITERIA_WORDS) else 0.2
        enhanced["descriptors"] = [
            f"Výborně (4): {criteria} splněno na vysoké úrovni",
            f"Dobře (3): {criteria} splněno s drobnými nedostatky",
            f"Dostatečně (2): {criteria} splněno základně",
            f"Nedostatečně (1): {criteria} nesplněno nebo s velkými nedostatky",
        ]
        return enhanced

    def _organize_presentation(self, content: Dict[str, Any], subtype: Optional[MaterialSubtype]) -> Dict[str, Any]:
        slides = content.get("slides")
        if not isinstance(slides, list):
            return content

        enhanced = []
        for index, slide in enumerate(slides):
            item = dict(as_dict(slide))
            bullets = as_list(item.get("bullets"))
            item["slideNumber"] = index + 1
            item["estimatedTime"] = f"{max(1, math.ceil((len(bullets) or 1) / 2))} min"
            item["visualSuggestions"] = self._slide_visual(get_text(item, "heading"))
            item["transitionSuggestion"] = (
                "Plynulý přechod k dalšímu tématu" if index < len(slides) - 1 else "Závěrečné shrnutí"
            )
            enhanced.append(item)
        content["slides"] = enhanced

        content["speakerNotes"] = []
        content["visualSuggestions"] = []
        for index, slide in enumerate(enhanced):
            heading = get_text(slide, "heading")
            bullets = ", ".join(str(b) for b in as_list(slide.get("bullets")))
            content["speakerNotes"].append(
                f"Slide {index + 1}: {heading}\n"
                f"Klíčové body k vysvětlení: {bullets or 'Rozveďte téma podle obsahu'}"
            )
            content["visualSuggestions"].append(
                f'Pro slide "{heading}": Použijte jednoduché schéma nebo diagram k vizualizaci hlavních bodů'
            )
        return content

    @staticmethod
    def _slide_visual(heading: str) -> str:
        heading = heading.lower()
        if "graf" in heading or "data" in heading:
            return "Graf nebo tabulka"
        if "proces" in heading or "postup" in heading:
            return "Vývojový diagram"
        if "porovnání" in heading:
            return "Srovnávací tabulka"
        return "Jednoduché schéma nebo obrázek"

    def _organize_activity(self, content: Dict[str, Any], subtype: Optional[MaterialSubtype]) -> Dict[str, Any]:
        instructions = content.get("instructions")
        if instructions:
            content["structuredInstructions"] = self._activity_phases(instructions)

        text = flatten_text(content)
        notes = ["Dodržujte pokyny učitele", "Pracujte opatrně s materiály"]
        if contains_any(text, ("nůžky", "řezání")):
            notes.append("Opatrně zacházejte s ostrými předměty")
        if contains_any(text, ("chemikálie", "experiment")):
            notes.append("Používejte ochranné pomůcky")
        content["safetyNotes"] = notes

        content["assessmentCriteria"] = list(ACTIVITY_ASSESSMENT)
        return content

    @staticmethod
    def _activity_phases(instructions: Any) -> Dict[str, List[Any]]:
        if isinstance(instructions, list):
            first = math.ceil(len(instructions) / 3)
            second = math.ceil(len(instructions) * 2 / 3)
            return {
                "preparation": instructions[:first],
                "execution": instructions[first:second],
                "conclusion": instructions[second:],
            }
        return {
            "preparation": ["Připravte si potřebné materiály"],
            "execution": [instructions],
            "conclusion": ["Zhodnoťte výsledky aktivity"],
        }
