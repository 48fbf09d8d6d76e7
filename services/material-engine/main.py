"""
Material Engine Service

Educational content pipeline for Czech teaching materials
(worksheets, lesson plans, quizzes, projects, presentations, activities).

Stages:
1. Assignment Analysis - structured analysis of a free-text assignment
2. Prompt Assembly - generation prompt from analysis, subtype and inputs
3. Content Structuring - scaffolding, difficulty progression, metadata
4. Content Validation - five-dimension quality score and acceptance gate
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
import uvicorn

from models.data_models import MaterialSubtype, MaterialType, QualityLevel
from config.settings import MaterialEngineConfig
from core.pipeline import MaterialPipeline, merge_analysis_inputs
from engines.prompt_builder import PromptBuildParams
from providers.llm_provider import CompletionError
from templates.subtypes import SubtypeRegistry
from utils.lenient_json import JSONExtractionError


config = MaterialEngineConfig.from_env()

logging.basicConfig(level=getattr(logging, config.log_level, logging.INFO))
logger = logging.getLogger(__name__)


# =============================================================================
# PYDANTIC MODELS FOR API
# =============================================================================

class AnalyzeRequest(BaseModel):
    """Free-text assignment to analyze"""
    description: str = Field(..., description="Assignment text as written by the teacher")

    class Config:
        json_schema_extra = {
            "example": {
                "description": "Procvičování zlomků pro 5. třídu. Žáci se naučí sčítat zlomky se stejným jmenovatelem.",
            }
        }


class PromptRequest(BaseModel):
    """Inputs of one prompt assembly"""
    material_type: MaterialType
    user_inputs: Dict[str, Any] = Field(default_factory=dict)
    quality_level: QualityLevel = QualityLevel.STANDARD
    subtype_id: Optional[str] = None
    description: Optional[str] = Field(default=None, description="Assignment analyzed before assembly")
    custom_instructions: Optional[str] = None


class StructureRequest(BaseModel):
    """Generated content to structure"""
    material_type: MaterialType
    content: Dict[str, Any]
    subtype_id: Optional[str] = None


class ValidateRequest(BaseModel):
    """Generated content to validate; the type is inferred when omitted"""
    content: Any = None
    material_type: Optional[MaterialType] = None


class GenerateRequest(PromptRequest):
    """Full generation: prompt, completion, structuring and validation"""

    class Config:
        json_schema_extra = {
            "example": {
                "material_type": "worksheet",
                "user_inputs": {"title": "Sčítání zlomků", "grade_level": "5. třída ZŠ", "question_count": 8},
                "quality_level": "vysoká",
                "subtype_id": "practice-problems",
            }
        }


class SubtypesResponse(BaseModel):
    subtypes: List[MaterialSubtype]
    total_count: int


# Global pipeline instance (the completion client connects on first use)
pipeline = MaterialPipeline(config)


# =============================================================================
# LIFESPAN
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    logger.info(
        f"[STARTUP] Material Engine ready: provider={config.llm_provider}, "
        f"threshold={config.acceptance_threshold}"
    )
    yield
    logger.info("[SHUTDOWN] Material Engine shutting down...")


# =============================================================================
# FASTAPI APP
# =============================================================================

app = FastAPI(
    title="Material Engine",
    description="Analysis, prompt assembly, structuring and validation of Czech teaching materials",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# ENDPOINTS
# =============================================================================

@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "material-engine", "llm_provider": config.llm_provider}


@app.post("/api/v1/analyze")
async def analyze_assignment(request: AnalyzeRequest):
    """Analyze an assignment; falls back to heuristics when the model is unavailable."""
    analysis = await pipeline.analyzer.analyze_assignment(request.description)
    return analysis.to_dict()


@app.post("/api/v1/prompt")
async def build_prompt(request: PromptRequest):
    """Assemble the generation prompt without calling the model for generation."""
    analysis = None
    if request.description and request.description.strip():
        analysis = await pipeline.analyzer.analyze_assignment(request.description)

    prompt = pipeline.prompt_builder.build_prompt(PromptBuildParams(
        material_type=request.material_type,
        user_inputs=merge_analysis_inputs(request.user_inputs, analysis),
        quality_level=request.quality_level,
        subtype=pipeline.resolve_subtype(request.material_type, request.subtype_id),
        assignment=analysis,
        custom_instructions=request.custom_instructions,
    ))
    return {
        "prompt": prompt,
        "analysis": analysis.to_dict() if analysis else None,
    }


@app.post("/api/v1/structure")
async def structure_content(request: StructureRequest):
    subtype = pipeline.resolve_subtype(request.material_type, request.subtype_id)
    structured = pipeline.structurer.structure_content(request.content, request.material_type, subtype)
    return structured.to_dict()


@app.post("/api/v1/validate")
async def validate_content(request: ValidateRequest):
    material_type = request.material_type or pipeline.validator.detect_material_type(request.content)
    result = pipeline.validator.validate_content(request.content, material_type)
    return {"materialType": material_type.value, **result.to_dict()}


@app.post("/api/v1/generate")
async def generate_material(request: GenerateRequest):
    """
    Generate a material end to end.

    A failed or undecodable completion is reported as 502.
    """
    try:
        result = await pipeline.generate(
            material_type=request.material_type,
            user_inputs=request.user_inputs,
            quality_level=request.quality_level,
            description=request.description,
            subtype_id=request.subtype_id,
            custom_instructions=request.custom_instructions,
        )
    except (CompletionError, JSONExtractionError) as e:
        logger.error(f"[API] Generation failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))
    return result.to_dict()


@app.get("/api/v1/subtypes", response_model=SubtypesResponse)
async def list_subtypes(material_type: Optional[MaterialType] = None):
    """Registered subtypes, optionally filtered by material type"""
    if material_type is None:
        subtypes = SubtypeRegistry.list_all()
    else:
        subtypes = SubtypeRegistry.get_by_type(material_type)
    return SubtypesResponse(subtypes=subtypes, total_count=len(subtypes))


@app.get("/api/v1/subtypes/{subtype_id}", response_model=MaterialSubtype)
async def get_subtype(subtype_id: str):
    subtype = SubtypeRegistry.get(subtype_id)
    if subtype is None:
        raise HTTPException(status_code=404, detail="Subtype not found")
    return subtype


# =============================================================================
# MAIN
# =============================================================================

if __name__ == "__main__":
    port = int(os.getenv("PORT", "8010"))
    uvicorn.run(app, host="0.0.0.0", port=port)
