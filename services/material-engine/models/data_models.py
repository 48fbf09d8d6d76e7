"""
Material Engine Data Models

Core data structures for the educational content pipeline:
assignment analysis, subtype configuration, structured content,
and validation results.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field


class MaterialType(str, Enum):
    """Kinds of teaching material the pipeline can generate"""
    WORKSHEET = "worksheet"
    LESSON_PLAN = "lesson-plan"
    QUIZ = "quiz"
    PROJECT = "project"
    PRESENTATION = "presentation"
    ACTIVITY = "activity"

    @classmethod
    def parse(cls, value: Any) -> Optional["MaterialType"]:
        """Return the enum member for a raw value, or None if unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except (ValueError, TypeError):
            return None


class DifficultyLevel(str, Enum):
    """Assignment difficulty (Czech labels are the wire values)"""
    BASIC = "základní"
    INTERMEDIATE = "střední"
    ADVANCED = "pokročilá"
    EXPERT = "expertní"


class QualityLevel(str, Enum):
    """Stylistic/rigor preset for generated content"""
    BASIC = "základní"
    STANDARD = "standardní"
    HIGH = "vysoká"
    EXPERT = "expertní"


class ModificationType(str, Enum):
    """Prompt edit operations carried by a subtype"""
    PREPEND = "prepend"
    APPEND = "append"
    REPLACE = "replace"
    INJECT = "inject"


class ScaffoldingType(str, Enum):
    HINT = "hint"
    EXAMPLE = "example"
    STEP = "step"
    REMINDER = "reminder"
    CONNECTION = "connection"


class BloomLevel(str, Enum):
    """Bloom's Taxonomy cognitive levels"""
    REMEMBER = "remember"
    UNDERSTAND = "understand"
    APPLY = "apply"
    ANALYZE = "analyze"
    EVALUATE = "evaluate"
    CREATE = "create"


class LearningStyle(str, Enum):
    VISUAL = "visual"
    AUDITORY = "auditory"
    KINESTHETIC = "kinesthetic"
    READING = "reading"


class IssueType(str, Enum):
    """Severity of a validation issue"""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class IssueCategory(str, Enum):
    CONTENT = "content"
    STRUCTURE = "structure"
    LANGUAGE = "language"
    PEDAGOGY = "pedagogy"
    MATH = "math"


BLOOM_CZECH_NAMES: Dict[BloomLevel, str] = {
    BloomLevel.REMEMBER: "Zapamatování",
    BloomLevel.UNDERSTAND: "Porozumění",
    BloomLevel.APPLY: "Aplikace",
    BloomLevel.ANALYZE: "Analýza",
    BloomLevel.EVALUATE: "Hodnocení",
    BloomLevel.CREATE: "Tvorba",
}

LEARNING_STYLE_CZECH_NAMES: Dict[LearningStyle, str] = {
    LearningStyle.VISUAL: "Vizuální",
    LearningStyle.AUDITORY: "Sluchový",
    LearningStyle.KINESTHETIC: "Pohybový",
    LearningStyle.READING: "Čtení/psaní",
}

# Weights of the five quality dimensions (sum to 1.0)
QUALITY_WEIGHTS: Dict[str, float] = {
    "accuracy": 0.25,
    "age_appropriateness": 0.20,
    "pedagogical_soundness": 0.25,
    "clarity": 0.15,
    "engagement": 0.15,
}


# ============================================================================
# Assignment analysis
# ============================================================================

@dataclass(frozen=True)
class AssignmentAnalysis:
    """Structured summary of a free-text assignment description"""
    learning_objectives: Tuple[str, ...]
    difficulty: DifficultyLevel
    subject: str
    grade_level: str
    estimated_duration: str
    key_topics: Tuple[str, ...]
    suggested_material_types: Tuple[MaterialType, ...]
    confidence: float

    def __post_init__(self):
        # frozen: go through object.__setattr__ to normalize
        object.__setattr__(self, "learning_objectives", tuple(self.learning_objectives)[:5])
        object.__setattr__(self, "key_topics", tuple(self.key_topics))
        object.__setattr__(self, "suggested_material_types", tuple(dict.fromkeys(self.suggested_material_types)))
        object.__setattr__(self, "confidence", max(0.0, min(1.0, float(self.confidence))))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "learningObjectives": list(self.learning_objectives),
            "difficulty": self.difficulty.value,
            "subject": self.subject,
            "gradeLevel": self.grade_level,
            "estimatedDuration": self.estimated_duration,
            "keyTopics": list(self.key_topics),
            "suggestedMaterialTypes": [t.value for t in self.suggested_material_types],
            "confidence": self.confidence,
        }


# ============================================================================
# Subtype configuration
# ============================================================================

class TemplateField(BaseModel):
    """Extra form field a subtype exposes to the teacher"""
    name: str
    type: str = Field(default="text", description="text | textarea | select | multiselect | boolean | number")
    label: str
    placeholder: Optional[str] = None
    options: List[str] = Field(default_factory=list)
    required: bool = False
    default_value: Optional[Any] = None


class PromptModification(BaseModel):
    """One ordered edit applied to the assembled prompt"""
    type: ModificationType
    content: str
    target: Optional[str] = Field(default=None, description="Required for replace/inject")


class MaterialSubtype(BaseModel):
    """Named specialization of a material type"""
    id: str
    name: str
    description: str = ""
    parent_type: MaterialType
    special_fields: List[TemplateField] = Field(default_factory=list)
    prompt_modifications: List[PromptModification] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "id": "practice-problems",
                "name": "Cvičné úlohy",
                "parent_type": "worksheet",
                "prompt_modifications": [
                    {"type": "append", "content": "Zaměř se na postupné zvyšování obtížnosti"}
                ],
            }
        }


# ============================================================================
# Structured content
# ============================================================================

@dataclass
class ScaffoldingElement:
    type: ScaffoldingType
    content: str
    position: int
    target_field: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "content": self.content,
            "position": self.position,
            "targetField": self.target_field,
        }


@dataclass
class ProgressionLevel:
    """One entry of a difficulty progression"""
    level: int
    description: str
    indicators: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level,
            "description": self.description,
            "indicators": list(self.indicators),
        }


@dataclass
class BloomLevelShare:
    level: BloomLevel
    czech_name: str
    percentage: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level.value,
            "czechName": self.czech_name,
            "percentage": self.percentage,
        }


@dataclass
class LearningStyleMatch:
    style: LearningStyle
    czech_name: str
    elements: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "style": self.style.value,
            "czechName": self.czech_name,
            "elements": list(self.elements),
        }


@dataclass
class CognitiveLoad:
    """Intrinsic/extraneous/germane load estimate, each in [0, 1]"""
    intrinsic: float
    extraneous: float
    germane: float
    overall: float

    def __post_init__(self):
        self.intrinsic = max(0.0, min(1.0, self.intrinsic))
        self.extraneous = max(0.0, min(1.0, self.extraneous))
        self.germane = max(0.0, min(1.0, self.germane))
        self.overall = max(0.0, min(1.0, self.overall))

    def to_dict(self) -> Dict[str, float]:
        return {
            "intrinsic": round(self.intrinsic, 3),
            "extraneous": round(self.extraneous, 3),
            "germane": round(self.germane, 3),
            "overall": round(self.overall, 3),
        }


@dataclass
class EducationalMetadata:
    blooms_taxonomy_levels: List[BloomLevelShare]
    learning_styles: List[LearningStyleMatch]
    assessment_type: str
    differentiation_options: List[str]
    prerequisite_knowledge: List[str]
    cognitive_load: CognitiveLoad

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bloomsTaxonomyLevels": [b.to_dict() for b in self.blooms_taxonomy_levels],
            "learningStyles": [s.to_dict() for s in self.learning_styles],
            "assessmentType": self.assessment_type,
            "differentiationOptions": list(self.differentiation_options),
            "prerequisiteKnowledge": list(self.prerequisite_knowledge),
            "cognitiveLoad": self.cognitive_load.to_dict(),
        }


@dataclass
class StructuredContent:
    original_content: Any
    structured_content: Any
    scaffolding: List[ScaffoldingElement]
    difficulty_progression: List[ProgressionLevel]
    educational_metadata: EducationalMetadata

    def to_dict(self) -> Dict[str, Any]:
        return {
            "originalContent": self.original_content,
            "structuredContent": self.structured_content,
            "scaffolding": [s.to_dict() for s in self.scaffolding],
            "difficultyProgression": [p.to_dict() for p in self.difficulty_progression],
            "educationalMetadata": self.educational_metadata.to_dict(),
        }


# ============================================================================
# Validation
# ============================================================================

@dataclass
class QualityScore:
    """Five quality dimensions plus their fixed weighted sum"""
    accuracy: float = 0.0
    age_appropriateness: float = 0.0
    pedagogical_soundness: float = 0.0
    clarity: float = 0.0
    engagement: float = 0.0

    @property
    def overall(self) -> float:
        return (
            QUALITY_WEIGHTS["accuracy"] * self.accuracy +
            QUALITY_WEIGHTS["age_appropriateness"] * self.age_appropriateness +
            QUALITY_WEIGHTS["pedagogical_soundness"] * self.pedagogical_soundness +
            QUALITY_WEIGHTS["clarity"] * self.clarity +
            QUALITY_WEIGHTS["engagement"] * self.engagement
        )

    @classmethod
    def zero(cls) -> "QualityScore":
        return cls()

    def to_dict(self) -> Dict[str, float]:
        return {
            "overall": self.overall,
            "accuracy": self.accuracy,
            "ageAppropriateness": self.age_appropriateness,
            "pedagogicalSoundness": self.pedagogical_soundness,
            "clarity": self.clarity,
            "engagement": self.engagement,
        }


@dataclass
class ValidationIssue:
    type: IssueType
    category: IssueCategory
    message: str
    field: Optional[str] = None
    suggestion: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "type": self.type.value,
            "category": self.category.value,
            "message": self.message,
        }
        if self.field is not None:
            data["field"] = self.field
        if self.suggestion is not None:
            data["suggestion"] = self.suggestion
        return data


@dataclass
class ValidationResult:
    is_valid: bool
    score: QualityScore
    issues: List[ValidationIssue] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)

    @property
    def errors(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.type == IssueType.ERROR]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "isValid": self.is_valid,
            "score": self.score.to_dict(),
            "issues": [i.to_dict() for i in self.issues],
            "suggestions": list(self.suggestions),
        }
