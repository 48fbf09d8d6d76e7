"""
Material Engine Configuration Settings
Global parameters and per-material-type validation settings
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional
import json
import os

from models.data_models import MaterialType


@dataclass
class MaterialTypeConfig:
    """Validation and structuring settings for one material type"""
    required_fields: List[str]
    assessment_type: str
    differentiation_extras: List[str] = field(default_factory=list)


BASE_REQUIRED_FIELDS: List[str] = ["title"]

# Predefined settings per material type
MATERIAL_TYPE_CONFIGS: Dict[MaterialType, MaterialTypeConfig] = {
    MaterialType.WORKSHEET: MaterialTypeConfig(
        required_fields=BASE_REQUIRED_FIELDS + ["instructions", "questions"],
        assessment_type="Procvičování a upevňování",
        differentiation_extras=[
            "Nápovědy a postupy řešení",
            "Kalkulačka pro složitější výpočty",
        ],
    ),
    MaterialType.LESSON_PLAN: MaterialTypeConfig(
        required_fields=BASE_REQUIRED_FIELDS + [
            "subject", "grade_level", "duration", "objectives", "activities",
        ],
        assessment_type="Smíšené hodnocení",
        differentiation_extras=[
            "Různé role ve skupinové práci",
            "Alternativní způsoby vysvětlení",
        ],
    ),
    MaterialType.QUIZ: MaterialTypeConfig(
        required_fields=BASE_REQUIRED_FIELDS + ["questions", "time_limit"],
        assessment_type="Formativní hodnocení",
        differentiation_extras=[
            "Různé typy otázek podle schopností žáků",
            "Možnost opakovaného pokusu",
        ],
    ),
    MaterialType.PROJECT: MaterialTypeConfig(
        required_fields=BASE_REQUIRED_FIELDS + ["description", "objectives", "deliverables"],
        assessment_type="Sumativní hodnocení",
        differentiation_extras=[
            "Volba tématu podle zájmů",
            "Různé formy výstupů",
        ],
    ),
    MaterialType.PRESENTATION: MaterialTypeConfig(
        required_fields=BASE_REQUIRED_FIELDS + ["slides"],
        assessment_type="Smíšené hodnocení",
        differentiation_extras=[
            "Podpůrné materiály k jednotlivým slidům",
            "Otázky k diskusi různé náročnosti",
        ],
    ),
    MaterialType.ACTIVITY: MaterialTypeConfig(
        required_fields=BASE_REQUIRED_FIELDS + ["goal", "instructions", "materials"],
        assessment_type="Aktivní učení",
        differentiation_extras=[
            "Různé role podle schopností žáků",
            "Zjednodušená varianta aktivity",
        ],
    ),
}

DEFAULT_MATERIAL_TYPE_CONFIG = MaterialTypeConfig(
    required_fields=list(BASE_REQUIRED_FIELDS),
    assessment_type="Smíšené hodnocení",
    differentiation_extras=[],
)


@dataclass
class MaterialEngineConfig:
    """Global Material Engine configuration"""

    # Completion service
    llm_provider: str = "openai"
    llm_model: Optional[str] = None
    llm_timeout_seconds: float = 30.0

    # Assignment analysis call
    analysis_temperature: float = 0.3
    analysis_max_tokens: int = 1000

    # Material generation call
    generation_temperature: float = 0.7
    generation_max_tokens: int = 3000

    # Validation gate
    acceptance_threshold: float = 0.6

    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "MaterialEngineConfig":
        """Load configuration from environment variables"""
        return cls(
            llm_provider=os.getenv("LLM_PROVIDER", "openai").lower(),
            llm_model=os.getenv("MATERIAL_ENGINE_MODEL") or None,
            llm_timeout_seconds=float(os.getenv("MATERIAL_ENGINE_LLM_TIMEOUT", "30")),
            analysis_temperature=float(os.getenv("MATERIAL_ENGINE_ANALYSIS_TEMPERATURE", "0.3")),
            analysis_max_tokens=int(os.getenv("MATERIAL_ENGINE_ANALYSIS_MAX_TOKENS", "1000")),
            generation_temperature=float(os.getenv("MATERIAL_ENGINE_GENERATION_TEMPERATURE", "0.7")),
            generation_max_tokens=int(os.getenv("MATERIAL_ENGINE_GENERATION_MAX_TOKENS", "3000")),
            acceptance_threshold=float(os.getenv("MATERIAL_ENGINE_ACCEPTANCE_THRESHOLD", "0.6")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    @classmethod
    def from_json(cls, path: str) -> "MaterialEngineConfig":
        """Load configuration from a JSON file"""
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return cls(**data)


def get_config_for_material_type(material_type) -> MaterialTypeConfig:
    """Settings for a material type; unknown types get the default entry"""
    parsed = MaterialType.parse(material_type)
    if parsed is None:
        return DEFAULT_MATERIAL_TYPE_CONFIG
    return MATERIAL_TYPE_CONFIGS.get(parsed, DEFAULT_MATERIAL_TYPE_CONFIG)
