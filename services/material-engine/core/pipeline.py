"""
Material Generation Pipeline

Orchestrates the engines for one generation request:
1. Assignment Analysis - optional, heuristic fallback on any failure
2. Prompt Assembly - deterministic prompt text
3. Completion - single call to the completion service
4. Lenient Decode - first JSON object of the reply
5. Structuring - scaffolding, progression, metadata
6. Validation - quality score and acceptance gate
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from models.data_models import (
    AssignmentAnalysis,
    MaterialSubtype,
    MaterialType,
    QualityLevel,
    StructuredContent,
    ValidationResult,
)
from config.settings import MaterialEngineConfig
from engines.assignment_analyzer import AssignmentAnalyzerEngine
from engines.content_structurer import ContentStructurerEngine
from engines.content_validator import ContentValidatorEngine
from engines.prompt_builder import PromptAssemblyEngine, PromptBuildParams
from engines.text_heuristics import TextHeuristicsEngine
from providers.llm_provider import CompletionClient
from templates.subtypes import SubtypeRegistry
from utils.lenient_json import parse_json_object

logger = logging.getLogger(__name__)


GENERATION_SYSTEM_PROMPT = (
    "Jsi zkušený český učitel a tvůrce výukových materiálů. "
    "Odpovídáš výhradně validním JSON objektem podle zadané struktury, bez dalšího textu."
)


@dataclass
class GenerationResult:
    """Everything produced for one generated material"""
    prompt: str
    content: Dict[str, Any]
    structured: StructuredContent
    validation: ValidationResult
    analysis: Optional[AssignmentAnalysis] = None
    generation_time_seconds: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "prompt": self.prompt,
            "content": self.content,
            "structured": self.structured.to_dict(),
            "validation": self.validation.to_dict(),
            "analysis": self.analysis.to_dict() if self.analysis else None,
            "generationTimeSeconds": self.generation_time_seconds,
        }


def merge_analysis_inputs(user_inputs: Dict[str, Any], analysis: Optional[AssignmentAnalysis]) -> Dict[str, Any]:
    """Fill title/subject/grade_level/duration the user left empty from the analysis."""
    merged = dict(user_inputs or {})
    if analysis is None:
        return merged

    derived = {
        "title": ", ".join(analysis.key_topics),
        "subject": analysis.subject,
        "grade_level": analysis.grade_level,
        "duration": analysis.estimated_duration,
    }
    for key, value in derived.items():
        if not merged.get(key) and value:
            merged[key] = value
    return merged


class MaterialPipeline:
    """
    Orchestrates analysis, prompt assembly, generation, structuring and validation.

    Only the analysis stage hides completion failures. A failed generation
    call raises CompletionError, an undecodable reply raises
    JSONExtractionError.
    """

    def __init__(
        self,
        config: Optional[MaterialEngineConfig] = None,
        completion_client: Optional[Any] = None,
    ):
        self.config = config or MaterialEngineConfig()
        self.client = completion_client or CompletionClient(
            provider=self.config.llm_provider,
            model=self.config.llm_model,
            timeout=self.config.llm_timeout_seconds,
        )

        heuristics = TextHeuristicsEngine()
        self.analyzer = AssignmentAnalyzerEngine(
            completion_client=self.client,
            heuristics=heuristics,
            temperature=self.config.analysis_temperature,
            max_tokens=self.config.analysis_max_tokens,
        )
        self.prompt_builder = PromptAssemblyEngine()
        self.structurer = ContentStructurerEngine()
        self.validator = ContentValidatorEngine(
            heuristics=heuristics,
            acceptance_threshold=self.config.acceptance_threshold,
        )

    def resolve_subtype(self, material_type: MaterialType, subtype_id: Optional[str]) -> Optional[MaterialSubtype]:
        """Registered subtype of the given material type, else None."""
        if not subtype_id:
            return None
        subtype = SubtypeRegistry.get(subtype_id)
        if subtype is None:
            logger.warning(f"[PIPELINE] Unknown subtype '{subtype_id}', proceeding without it")
            return None
        if subtype.parent_type != material_type:
            logger.warning(
                f"[PIPELINE] Subtype '{subtype_id}' belongs to {subtype.parent_type.value}, "
                f"not {material_type.value}; ignoring it"
            )
            return None
        return subtype

    async def generate(
        self,
        material_type: MaterialType,
        user_inputs: Optional[Dict[str, Any]] = None,
        quality_level: QualityLevel = QualityLevel.STANDARD,
        description: Optional[str] = None,
        subtype_id: Optional[str] = None,
        custom_instructions: Optional[str] = None,
    ) -> GenerationResult:
        """
        Generate, structure and validate one material.

        Args:
            material_type: Kind of material to generate
            user_inputs: Teacher-supplied options (title, subject, grade_level, ...)
            quality_level: Quality preset
            description: Free-text assignment; analyzed when present
            subtype_id: ID of a registered subtype of material_type
            custom_instructions: Extra instructions appended to the prompt

        Returns:
            GenerationResult
        """
        start_time = time.time()

        analysis = None
        if description and description.strip():
            logger.info(f"[PIPELINE] Analyzing assignment ({len(description)} chars)")
            analysis = await self.analyzer.analyze_assignment(description)

        subtype = self.resolve_subtype(material_type, subtype_id)
        inputs = merge_analysis_inputs(user_inputs or {}, analysis)

        prompt = self.prompt_builder.build_prompt(PromptBuildParams(
            material_type=material_type,
            user_inputs=inputs,
            quality_level=quality_level,
            subtype=subtype,
            assignment=analysis,
            custom_instructions=custom_instructions,
        ))
        logger.info(f"[PIPELINE] Built {material_type.value} prompt ({len(prompt)} chars)")

        reply = await self.client.complete(
            system=GENERATION_SYSTEM_PROMPT,
            prompt=prompt,
            temperature=self.config.generation_temperature,
            max_tokens=self.config.generation_max_tokens,
        )
        content = parse_json_object(reply)
        logger.info(f"[PIPELINE] Decoded generated content with {len(content)} top-level fields")

        structured = self.structurer.structure_content(content, material_type, subtype)
        validation = self.validator.validate_content(content, material_type)

        elapsed = time.time() - start_time
        logger.info(
            f"[PIPELINE] Generated {material_type.value} in {elapsed:.1f}s: "
            f"overall={validation.score.overall:.2f}, valid={validation.is_valid}"
        )

        return GenerationResult(
            prompt=prompt,
            content=content,
            structured=structured,
            validation=validation,
            analysis=analysis,
            generation_time_seconds=elapsed,
        )
