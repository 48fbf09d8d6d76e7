"""Material Engine Core"""
from .pipeline import (
    GENERATION_SYSTEM_PROMPT,
    GenerationResult,
    MaterialPipeline,
    merge_analysis_inputs,
)

__all__ = [
    "GENERATION_SYSTEM_PROMPT",
    "GenerationResult",
    "MaterialPipeline",
    "merge_analysis_inputs",
]
