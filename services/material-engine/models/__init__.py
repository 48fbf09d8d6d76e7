"""
Material Engine Data Models

Core data structures for the educational content pipeline.
"""

from models.data_models import (
    MaterialType,
    DifficultyLevel,
    QualityLevel,
    ModificationType,
    ScaffoldingType,
    BloomLevel,
    LearningStyle,
    IssueType,
    IssueCategory,
    AssignmentAnalysis,
    TemplateField,
    PromptModification,
    MaterialSubtype,
    ScaffoldingElement,
    ProgressionLevel,
    BloomLevelShare,
    LearningStyleMatch,
    CognitiveLoad,
    EducationalMetadata,
    StructuredContent,
    QualityScore,
    ValidationIssue,
    ValidationResult,
    BLOOM_CZECH_NAMES,
    LEARNING_STYLE_CZECH_NAMES,
    QUALITY_WEIGHTS,
)

__all__ = [
    "MaterialType",
    "DifficultyLevel",
    "QualityLevel",
    "ModificationType",
    "ScaffoldingType",
    "BloomLevel",
    "LearningStyle",
    "IssueType",
    "IssueCategory",
    "AssignmentAnalysis",
    "TemplateField",
    "PromptModification",
    "MaterialSubtype",
    "ScaffoldingElement",
    "ProgressionLevel",
    "BloomLevelShare",
    "LearningStyleMatch",
    "CognitiveLoad",
    "EducationalMetadata",
    "StructuredContent",
    "QualityScore",
    "ValidationIssue",
    "ValidationResult",
    "BLOOM_CZECH_NAMES",
    "LEARNING_STYLE_CZECH_NAMES",
    "QUALITY_WEIGHTS",
]
