"""
Material Engine Engines

Stages of the educational content pipeline.
"""

from engines.text_heuristics import TextHeuristicsEngine
from engines.assignment_analyzer import AssignmentAnalyzerEngine
from engines.prompt_builder import PromptAssemblyEngine, PromptBuildParams, apply_modification, apply_modifications
from engines.content_structurer import ContentStructurerEngine
from engines.content_validator import ContentValidatorEngine

__all__ = [
    "TextHeuristicsEngine",
    "AssignmentAnalyzerEngine",
    "PromptAssemblyEngine",
    "PromptBuildParams",
    "apply_modification",
    "apply_modifications",
    "ContentStructurerEngine",
    "ContentValidatorEngine",
]
