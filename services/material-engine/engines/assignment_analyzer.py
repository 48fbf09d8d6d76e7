"""
Assignment Analyzer Engine

First stage of the material pipeline.
Turns a free-text assignment description into an AssignmentAnalysis,
using the completion service when available and the text heuristics
otherwise.
"""

import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional, Tuple

from models.data_models import AssignmentAnalysis, DifficultyLevel, MaterialType
from engines.text_heuristics import (
    DEFAULT_DURATION,
    DEFAULT_SUBJECT,
    UNDETERMINED_GRADE,
    TextHeuristicsEngine,
    contains_any,
)
from utils.lenient_json import as_number, as_str, as_str_list, parse_json_object

logger = logging.getLogger(__name__)


ANALYSIS_SYSTEM_PROMPT = (
    "Jsi expert na vzdělávání v České republice. Analyzuješ zadání úkolů "
    "a poskytneš strukturovanou analýzu pro tvorbu výukových materiálů."
)

ANALYSIS_PROMPT = """
Analyzuj následující zadání úkolu a poskytni strukturovanou analýzu:

ZADÁNÍ:
{description}

Poskytni analýzu ve formátu JSON s následujícími klíči:
{{
  "learningObjectives": ["seznam konkrétních cílů učení"],
  "difficulty": "základní|střední|pokročilá|expertní",
  "subject": "předmět (matematika, čeština, přírodověda, atd.)",
  "gradeLevel": "ročník (1.-9. třída ZŠ, 1.-4. ročník SŠ)",
  "estimatedDuration": "odhadovaná doba (např. '45 min', '2 hodiny')",
  "keyTopics": ["klíčová témata a koncepty"],
  "confidence": 0.85
}}

Zaměř se na:
- Identifikaci konkrétních vzdělávacích cílů
- Určení obtížnosti na základě kognitivní náročnosti
- Rozpoznání předmětu a ročníku
- Odhad času potřebného k dokončení
- Extrakci klíčových témat
"""

# Checked in order; each hit adds its material type
MATERIAL_TYPE_KEYWORDS: Tuple[Tuple[MaterialType, Tuple[str, ...]], ...] = (
    (MaterialType.WORKSHEET, ("cvičení", "úlohy", "problémy", "výpočty", "procvičování")),
    (MaterialType.LESSON_PLAN, ("hodina", "výuka", "vysvětlit", "naučit", "prezentovat")),
    (MaterialType.QUIZ, ("test", "zkouška", "ověření", "kontrola", "kvíz")),
    (MaterialType.PROJECT, ("projekt", "výzkum", "dlouhodobý", "samostatná práce", "tvorba")),
    (MaterialType.PRESENTATION, ("prezentace", "slidy", "vystoupení", "přednesení")),
    (MaterialType.ACTIVITY, ("aktivita", "hra", "cvičení", "skupinová práce", "interakce")),
)

DIFFICULTY_DEFAULT_TYPES: Dict[DifficultyLevel, List[MaterialType]] = {
    DifficultyLevel.BASIC: [MaterialType.WORKSHEET, MaterialType.ACTIVITY],
    DifficultyLevel.INTERMEDIATE: [MaterialType.LESSON_PLAN, MaterialType.WORKSHEET, MaterialType.QUIZ],
    DifficultyLevel.ADVANCED: [MaterialType.PROJECT, MaterialType.PRESENTATION, MaterialType.QUIZ],
    DifficultyLevel.EXPERT: [MaterialType.PROJECT, MaterialType.PRESENTATION],
}

FALLBACK_MATERIAL_TYPES = [MaterialType.WORKSHEET, MaterialType.LESSON_PLAN]
FALLBACK_CONFIDENCE = 0.5
DEFAULT_CONFIDENCE = 0.7


class AssignmentAnalyzerEngine:
    """
    Analyzes assignment descriptions.

    analyze_assignment never raises: any completion or decoding failure
    switches to the heuristic fallback, which has the same output shape.
    """

    def __init__(
        self,
        completion_client: Optional[Any] = None,
        heuristics: Optional[TextHeuristicsEngine] = None,
        temperature: float = 0.3,
        max_tokens: int = 1000,
    ):
        self.client = completion_client
        self.heuristics = heuristics or TextHeuristicsEngine()
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def analyze_assignment(self, description: str) -> AssignmentAnalysis:
        """
        Analyze a free-text assignment.

        Args:
            description: Assignment text as written by the teacher

        Returns:
            AssignmentAnalysis (model-derived, or heuristic with confidence 0.5)
        """
        if self.client is None:
            logger.info("[ANALYZER] No completion client configured, using heuristic analysis")
            return self.create_fallback_analysis(description)

        try:
            response = await self.client.complete(
                system=ANALYSIS_SYSTEM_PROMPT,
                prompt=self.build_analysis_prompt(description),
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
            analysis = self.parse_analysis_response(response)
        except Exception as e:
            logger.warning(f"[ANALYZER] Analysis failed, falling back to heuristics: {e}")
            return self.create_fallback_analysis(description)

        logger.info(
            f"[ANALYZER] Analyzed assignment: subject={analysis.subject}, "
            f"difficulty={analysis.difficulty.value}, confidence={analysis.confidence:.2f}"
        )
        return analysis

    def build_analysis_prompt(self, description: str) -> str:
        return ANALYSIS_PROMPT.format(description=description)

    def parse_analysis_response(self, content: str) -> AssignmentAnalysis:
        """
        Normalize a model response into an AssignmentAnalysis.

        Raises:
            JSONExtractionError: if the response holds no JSON object
        """
        parsed = parse_json_object(content)

        analysis = AssignmentAnalysis(
            learning_objectives=as_str_list(parsed.get("learningObjectives")),
            difficulty=self._validate_difficulty(parsed.get("difficulty")),
            subject=as_str(parsed.get("subject"), DEFAULT_SUBJECT),
            grade_level=as_str(parsed.get("gradeLevel"), UNDETERMINED_GRADE),
            estimated_duration=as_str(parsed.get("estimatedDuration"), DEFAULT_DURATION),
            key_topics=as_str_list(parsed.get("keyTopics")),
            suggested_material_types=[],
            confidence=as_number(parsed.get("confidence"), DEFAULT_CONFIDENCE),
        )
        # never trust the model's own suggestion
        return replace(analysis, suggested_material_types=self.suggest_material_types(analysis))

    def create_fallback_analysis(self, description: str) -> AssignmentAnalysis:
        """Heuristic-only analysis; deterministic for a given description."""
        description = description if isinstance(description, str) else ""
        return AssignmentAnalysis(
            learning_objectives=self.heuristics.extract_learning_objectives(description),
            difficulty=self.heuristics.detect_difficulty(description),
            subject=self.heuristics.detect_subject(description),
            grade_level=self.heuristics.detect_grade_level(description),
            estimated_duration=self.heuristics.estimate_duration(description),
            key_topics=self.heuristics.extract_key_concepts(description),
            suggested_material_types=list(FALLBACK_MATERIAL_TYPES),
            confidence=FALLBACK_CONFIDENCE,
        )

    def suggest_material_types(self, analysis: AssignmentAnalysis) -> List[MaterialType]:
        """Keyword-matched material types, or difficulty defaults when none match."""
        text = " ".join(analysis.key_topics).lower()
        suggestions: List[MaterialType] = []

        for material_type, keywords in MATERIAL_TYPE_KEYWORDS:
            if contains_any(text, keywords) and material_type not in suggestions:
                suggestions.append(material_type)

        if not suggestions:
            suggestions = list(DIFFICULTY_DEFAULT_TYPES.get(analysis.difficulty, []))

        return suggestions

    @staticmethod
    def _validate_difficulty(value: Any) -> DifficultyLevel:
        try:
            return DifficultyLevel(value)
        except (ValueError, TypeError):
            return DifficultyLevel.INTERMEDIATE
