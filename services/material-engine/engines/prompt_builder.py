"""
Prompt Assembly Engine

Builds the generation prompt for a material as an ordered pipeline of
text stages:

1. base template for the material type
2. assignment context (prepended)
3. subtype prompt modifications, in list order
4. quality constraints
5. user specification
6. custom instructions
7. finalization block
"""

import re
from dataclasses import dataclass, field
from functools import reduce
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from models.data_models import (
    AssignmentAnalysis,
    MaterialSubtype,
    MaterialType,
    ModificationType,
    PromptModification,
    QualityLevel,
)


BASE_PROMPTS: Dict[MaterialType, str] = {
    MaterialType.WORKSHEET: """
Vytvoř kvalitní pracovní list v českém jazyce podle následujících specifikací.

STRUKTURA PRACOVNÍHO LISTU:
1. Hlavička s názvem, místem pro jméno žáka, třídu a datum
2. Jasné pokyny pro žáky
3. Postupně se zvyšující obtížnost úloh
4. Různorodé typy úloh pro udržení pozornosti
5. Dostatečný prostor pro odpovědi
6. Bonusové úlohy pro rychlejší žáky

POŽADAVKY NA OBSAH:
- Všechny úlohy musí být jasně formulované
- Poskytni správné odpovědi pro všechny úlohy
- Zahrň praktické příklady a aplikace
- Používej věkově přiměřený jazyk
- Dodržuj české pravopisné normy

FORMÁT VÝSTUPU:
Vrať JSON objekt s následující strukturou:
{
  "title": "Název pracovního listu",
  "instructions": "Pokyny pro žáky",
  "questions": [
    {
      "problem": "Znění úlohy",
      "answer": "Správná odpověď",
      "type": "typ úlohy (calculation, word_problem, multiple_choice, atd.)"
    }
  ],
  "tags": ["relevantní štítky"]
}
""",
    MaterialType.LESSON_PLAN: """
Vytvoř detailní plán hodiny v českém jazyce podle následujících specifikací.

STRUKTURA PLÁNU HODINY:
1. Základní informace (název, předmět, ročník, doba trvání)
2. Cíle hodiny (konkrétní a měřitelné)
3. Potřebné materiály a pomůcky
4. Postupné aktivity s časovým rozpisem
5. Diferenciace pro různé typy žáků
6. Domácí úkol
7. Způsob hodnocení

POŽADAVKY NA OBSAH:
- Aktivity musí logicky navazovat
- Celkový čas aktivit se musí shodovat s délkou hodiny
- Zahrň různé formy práce (individuální, skupinová, frontální)
- Respektuj principy moderní pedagogiky
- Poskytni konkrétní kroky pro každou aktivitu

FORMÁT VÝSTUPU:
Vrať JSON objekt s následující strukturou:
{
  "title": "Název hodiny",
  "subject": "Předmět",
  "grade_level": "Ročník",
  "duration": "Doba trvání",
  "objectives": ["seznam cílů"],
  "materials": ["seznam materiálů"],
  "activities": [
    {
      "name": "Název aktivity",
      "description": "Popis aktivity",
      "steps": ["kroky aktivity"],
      "time": "čas v minutách"
    }
  ],
  "differentiation": "Způsoby diferenciace",
  "homework": "Domácí úkol",
  "assessment": "Způsob hodnocení",
  "tags": ["relevantní štítky"]
}
""",
    MaterialType.QUIZ: """
Vytvoř kvalitní kvíz v českém jazyce podle následujících specifikací.

STRUKTURA KVÍZU:
1. Základní informace (název, předmět, ročník, časový limit)
2. Různorodé typy otázek
3. Vyvážené pokrytí učiva
4. Postupně se zvyšující obtížnost
5. Jasné a jednoznačné formulace
6. Správné odpovědi s vysvětleními

TYPY OTÁZEK:
- Výběr z možností (multiple_choice)
- Pravda/nepravda (true_false)
- Krátká odpověď (short_answer)

POŽADAVKY NA OBSAH:
- Otázky musí být jasné a jednoznačné
- Nesprávné možnosti musí být věrohodné
- Zahrň různé kognitivní úrovně (znalosti, porozumění, aplikace)
- Používej věkově přiměřený jazyk

FORMÁT VÝSTUPU:
Vrať JSON objekt s následující strukturou:
{
  "title": "Název kvízu",
  "subject": "Předmět",
  "grade_level": "Ročník",
  "time_limit": "Časový limit nebo 'no_limit'",
  "questions": [
    {
      "type": "multiple_choice|true_false|short_answer",
      "question": "Znění otázky",
      "options": ["možnosti pro multiple_choice"],
      "answer": "správná odpověď (pro true_false použij 'pravda' nebo 'nepravda')"
    }
  ],
  "tags": ["relevantní štítky"]
}
""",
    MaterialType.PROJECT: """
Vytvoř detailní zadání projektu v českém jazyce podle následujících specifikací.

STRUKTURA PROJEKTU:
1. Základní informace (název, předmět, ročník, doba trvání)
2. Cíle a očekávané výstupy
3. Detailní popis zadání
4. Seznam výstupů (deliverables)
5. Hodnotící rubrika s kritérii
6. Doporučené zdroje a materiály

POŽADAVKY NA OBSAH:
- Projekt musí být realizovatelný v daném časovém rámci
- Cíle musí být konkrétní a měřitelné
- Rubrika musí pokrývat všechny důležité aspekty
- Zahrň možnosti pro různé úrovně žáků
- Poskytni jasné pokyny a očekávání

FORMÁT VÝSTUPU:
Vrať JSON objekt s následující strukturou:
{
  "template": "project",
  "title": "Název projektu",
  "subject": "Předmět",
  "grade_level": "Ročník",
  "duration": "Doba trvání",
  "objectives": ["seznam cílů"],
  "description": "Detailní popis zadání",
  "deliverables": ["seznam výstupů"],
  "rubric": [
    {
      "criteria": "Kritérium hodnocení",
      "levels": ["úrovně hodnocení"]
    }
  ],
  "tags": ["relevantní štítky"]
}
""",
    MaterialType.PRESENTATION: """
Vytvoř strukturu prezentace v českém jazyce podle následujících specifikací.

STRUKTURA PREZENTACE:
1. Úvodní slide s názvem a základními informacemi
2. Přehled obsahu
3. Hlavní slides s klíčovými body
4. Praktické příklady a aplikace
5. Shrnutí a závěr
6. Otázky k diskusi

POŽADAVKY NA OBSAH:
- Každý slide musí mít jasný nadpis
- Používej odrážky pro lepší přehlednost
- Zahrň vizuální návrhy tam, kde je to vhodné
- Obsah musí být věkově přiměřený
- Dodržuj logickou posloupnost témat

FORMÁT VÝSTUPU:
Vrať JSON objekt s následující strukturou:
{
  "template": "presentation",
  "title": "Název prezentace",
  "subject": "Předmět",
  "grade_level": "Ročník",
  "slides": [
    {
      "heading": "Nadpis slidu",
      "bullets": ["seznam bodů na slidu"]
    }
  ],
  "tags": ["relevantní štítky"]
}
""",
    MaterialType.ACTIVITY: """
Vytvoř popis vzdělávací aktivity v českém jazyce podle následujících specifikací.

STRUKTURA AKTIVITY:
1. Základní informace (název, předmět, ročník, doba trvání)
2. Cíl aktivity
3. Potřebné materiály
4. Krok za krokem pokyny
5. Varianty pro různé úrovně
6. Očekávané výsledky

POŽADAVKY NA OBSAH:
- Aktivita musí být prakticky realizovatelná
- Pokyny musí být jasné a srozumitelné
- Zahrň bezpečnostní upozornění, pokud je to relevantní
- Poskytni alternativy pro různé velikosti skupin
- Aktivita musí podporovat stanovené cíle učení

FORMÁT VÝSTUPU:
Vrať JSON objekt s následující strukturou:
{
  "title": "Název aktivity",
  "subject": "Předmět",
  "grade_level": "Ročník",
  "duration": "Doba trvání",
  "goal": "Cíl aktivity",
  "instructions": ["seznam pokynů"],
  "materials": ["seznam materiálů"],
  "variation": "Varianty aktivity",
  "tags": ["relevantní štítky"]
}
""",
}

DEFAULT_PROMPT = """
Vytvoř kvalitní vzdělávací materiál typu "{material_type}" v českém jazyce.
Materiál musí být pedagogicky správný, věkově přiměřený a prakticky použitelný.
Vrať výsledek jako validní JSON objekt.
"""

QUALITY_CONSTRAINTS: Dict[QualityLevel, List[str]] = {
    QualityLevel.BASIC: [
        "Používej jednoduchý a srozumitelný jazyk",
        "Zahrň základní příklady a vysvětlení",
        "Poskytni jasné pokyny a instrukce",
        "Minimalizuj složitost úloh",
    ],
    QualityLevel.STANDARD: [
        "Používej přiměřeně náročný jazyk",
        "Zahrň praktické příklady a aplikace",
        "Poskytni detailní vysvětlení konceptů",
        "Vyvažuj různé typy úloh a aktivit",
        "Dodržuj pedagogické principy",
    ],
    QualityLevel.HIGH: [
        "Používej precizní a odborný jazyk",
        "Zahrň komplexní příklady a případové studie",
        "Poskytni hluboké analýzy a vysvětlení",
        "Integruj mezipředmětové souvislosti",
        "Podporuj kritické myšlení",
        "Dodržuj nejvyšší pedagogické standardy",
    ],
    QualityLevel.EXPERT: [
        "Používej expertní terminologii a koncepty",
        "Zahrň nejnovější poznatky z oboru",
        "Poskytni originální přístupy a metodiky",
        "Integruj výzkumné poznatky",
        "Podporuj inovativní myšlení",
        "Respektuj nejnovější pedagogické trendy",
        "Zahrň možnosti pro samostatný výzkum",
    ],
}

# (user input key, label) rendered for every material type
COMMON_INPUT_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("title", "Název"),
    ("subject", "Předmět"),
    ("grade_level", "Ročník"),
    ("duration", "Doba trvání"),
)

TYPE_INPUT_FIELDS: Dict[MaterialType, Tuple[Tuple[str, str], ...]] = {
    MaterialType.WORKSHEET: (
        ("question_count", "Počet úloh"),
        ("difficulty_progression", "Postupné zvyšování obtížnosti"),
        ("include_answer_key", "Zahrnout klíč odpovědí"),
    ),
    MaterialType.QUIZ: (
        ("question_count", "Počet otázek"),
        ("time_limit", "Časový limit"),
        ("question_types", "Typy otázek"),
    ),
    MaterialType.LESSON_PLAN: (
        ("class_size", "Velikost třídy"),
        ("teaching_methods", "Metody výuky"),
        ("available_resources", "Dostupné zdroje"),
    ),
    MaterialType.PROJECT: (
        ("project_type", "Typ projektu"),
        ("group_size", "Velikost skupiny"),
        ("assessment_criteria", "Kritéria hodnocení"),
    ),
    MaterialType.PRESENTATION: (
        ("slide_count", "Počet slidů"),
        ("presentation_style", "Styl prezentace"),
        ("target_audience", "Cílová skupina"),
    ),
    MaterialType.ACTIVITY: (
        ("activity_type", "Typ aktivity"),
        ("group_size", "Velikost skupiny"),
        ("required_materials", "Potřebné materiály"),
    ),
}


@dataclass
class PromptBuildParams:
    """Inputs of one prompt assembly"""
    material_type: Union[MaterialType, str]
    user_inputs: Dict[str, Any] = field(default_factory=dict)
    quality_level: Union[QualityLevel, str] = QualityLevel.STANDARD
    subtype: Optional[MaterialSubtype] = None
    assignment: Optional[AssignmentAnalysis] = None
    custom_instructions: Optional[str] = None


# ============================================================================
# Prompt modifications
# ============================================================================

def apply_modification(prompt: str, modification: PromptModification) -> str:
    """Apply one subtype modification; replace/inject without a target are no-ops."""
    if modification.type == ModificationType.PREPEND:
        return f"{modification.content}\n\n{prompt}"

    if modification.type == ModificationType.APPEND:
        return f"{prompt}\n\n{modification.content}"

    if modification.type == ModificationType.REPLACE:
        if not modification.target:
            return prompt
        return re.sub(
            re.escape(modification.target),
            lambda _: modification.content,
            prompt,
            flags=re.IGNORECASE,
        )

    if modification.type == ModificationType.INJECT:
        if not modification.target:
            return prompt
        index = prompt.find(modification.target)
        if index == -1:
            return prompt
        end = index + len(modification.target)
        return f"{prompt[:end]}\n{modification.content}\n{prompt[end:]}"

    return prompt


def apply_modifications(prompt: str, modifications: Iterable[PromptModification]) -> str:
    """Fold the modifications over the prompt in list order."""
    return reduce(apply_modification, modifications, prompt)


def _render_value(value: Any) -> str:
    if isinstance(value, bool):
        return "ano" if value else "ne"
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value)
    return str(value)


class PromptAssemblyEngine:
    """Deterministic prompt builder; no I/O, never raises on missing inputs."""

    def build_prompt(self, params: PromptBuildParams) -> str:
        prompt = self.get_base_prompt(params.material_type)

        if params.assignment is not None:
            prompt = self.add_assignment_context(prompt, params.assignment)

        if params.subtype is not None:
            prompt = self.add_subtype_modifications(prompt, params.subtype)

        prompt = self.add_quality_constraints(prompt, params.quality_level)
        prompt = self.add_user_inputs(prompt, params.user_inputs or {}, params.material_type)

        if params.custom_instructions:
            prompt = self.add_custom_instructions(prompt, params.custom_instructions)

        return self.finalize_prompt(prompt, params.user_inputs or {})

    def get_base_prompt(self, material_type: Union[MaterialType, str]) -> str:
        parsed = MaterialType.parse(material_type)
        if parsed is not None and parsed in BASE_PROMPTS:
            return BASE_PROMPTS[parsed]
        raw = material_type.value if isinstance(material_type, MaterialType) else material_type
        return DEFAULT_PROMPT.format(material_type=raw)

    def add_assignment_context(self, prompt: str, assignment: AssignmentAnalysis) -> str:
        objectives = "\n".join(f"- {objective}" for objective in assignment.learning_objectives)
        context_section = (
            "\nKONTEXT ZADÁNÍ:\n"
            f"- Předmět: {assignment.subject}\n"
            f"- Ročník: {assignment.grade_level}\n"
            f"- Obtížnost: {assignment.difficulty.value}\n"
            f"- Odhadovaná doba: {assignment.estimated_duration}\n"
            f"- Klíčová témata: {', '.join(assignment.key_topics)}\n"
            "\n"
            "CÍLE UČENÍ:\n"
            f"{objectives}\n"
            "\n"
            "POKYNY PRO GENEROVÁNÍ:\n"
            "Zaměř se na uvedené cíle učení a přizpůsob obsah specifikované obtížnosti a ročníku.\n"
            "Zajisti, že materiál pokrývá klíčová témata a je vhodný pro daný předmět.\n"
        )
        return f"{context_section}\n\n{prompt}"

    def add_subtype_modifications(self, prompt: str, subtype: MaterialSubtype) -> str:
        return apply_modifications(prompt, subtype.prompt_modifications)

    def add_quality_constraints(self, prompt: str, quality_level: Union[QualityLevel, str]) -> str:
        try:
            level = QualityLevel(quality_level)
        except (ValueError, TypeError):
            return prompt

        constraints = QUALITY_CONSTRAINTS.get(level, [])
        if not constraints:
            return prompt

        lines = "\n".join(f"- {constraint}" for constraint in constraints)
        quality_section = f"\nPOŽADAVKY NA KVALITU ({level.value.upper()}):\n{lines}\n"
        return f"{prompt}\n\n{quality_section}"

    def add_user_inputs(
        self,
        prompt: str,
        user_inputs: Dict[str, Any],
        material_type: Union[MaterialType, str],
    ) -> str:
        return f"{prompt}\n\n{self.build_user_input_section(user_inputs, material_type)}"

    def build_user_input_section(
        self,
        user_inputs: Dict[str, Any],
        material_type: Union[MaterialType, str],
    ) -> str:
        """Labeled lines for the inputs that are present (truthy)."""
        fields = COMMON_INPUT_FIELDS + TYPE_INPUT_FIELDS.get(MaterialType.parse(material_type), ())
        section = "SPECIFIKACE UŽIVATELE:\n"
        for key, label in fields:
            value = user_inputs.get(key)
            if value:
                section += f"- {label}: {_render_value(value)}\n"
        return section

    def add_custom_instructions(self, prompt: str, custom_instructions: str) -> str:
        custom_section = (
            "\nDODATEČNÉ POKYNY:\n"
            f"{custom_instructions}\n"
            "\n"
            "Zajisti, že tyto pokyny jsou plně respektovány při generování obsahu.\n"
        )
        return f"{prompt}\n\n{custom_section}"

    def finalize_prompt(self, prompt: str, user_inputs: Dict[str, Any]) -> str:
        grade_level = user_inputs.get("grade_level") or "daný ročník"
        final_section = (
            "\nDŮLEŽITÉ PŘIPOMÍNKY:\n"
            "- Veškerý obsah musí být v českém jazyce\n"
            "- Dodržuj české pravopisné a gramatické normy\n"
            f"- Používej věkově přiměřený jazyk pro {grade_level}\n"
            "- Zajisti pedagogickou správnost a užitečnost materiálu\n"
            "- Vrať pouze validní JSON objekt bez dalšího textu\n"
            "- Všechny povinné pole musí být vyplněna\n"
            "\n"
            "ZAČNI GENEROVÁNÍ:\n"
        )
        return f"{prompt}\n\n{final_section}"
