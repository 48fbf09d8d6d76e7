"""
Pytest Configuration and Shared Fixtures for Material Engine Tests
"""

import os
import sys
from unittest.mock import AsyncMock

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from models.data_models import AssignmentAnalysis, DifficultyLevel, MaterialType
from config.settings import MaterialEngineConfig


# ============================================
# Configuration Fixtures
# ============================================

@pytest.fixture
def engine_config():
    """Default Material Engine configuration."""
    return MaterialEngineConfig()


@pytest.fixture
def completion_client():
    """Completion client double; set .complete.return_value / .side_effect per test."""
    client = AsyncMock()
    client.complete = AsyncMock(return_value="{}")
    return client


# ============================================
# Data Fixtures
# ============================================

@pytest.fixture
def sample_analysis():
    return AssignmentAnalysis(
        learning_objectives=["Sčítat zlomky se stejným jmenovatelem"],
        difficulty=DifficultyLevel.BASIC,
        subject="matematika",
        grade_level="5. třída ZŠ",
        estimated_duration="45 min",
        key_topics=["zlomky", "sčítání"],
        suggested_material_types=[MaterialType.WORKSHEET],
        confidence=0.9,
    )


@pytest.fixture
def sample_worksheet():
    """Well-formed worksheet as the model would return it."""
    return {
        "title": "Sčítání zlomků",
        "instructions": "Vypočítajte všechny příklady a napište výsledek do rámečku.",
        "grade_level": "5. třída",
        "questions": [
            {"problem": "Kolik je 1 + 2?", "answer": "3", "type": "calculation"},
            {"problem": "Kolik je 12 + 15 celkem?", "answer": "27", "type": "calculation"},
            {"problem": "Jak sečteš zlomky 1/4 a 2/4, když mají stejný jmenovatel?", "answer": "3/4", "type": "word_problem"},
        ],
    }


@pytest.fixture
def sample_lesson_plan():
    return {
        "title": "Úvod do zlomků",
        "subject": "matematika",
        "grade_level": "4. třída",
        "duration": "45 min",
        "objectives": ["Žák se naučí pojmenovat části zlomku", "Žák dokáže porovnat dva zlomky"],
        "activities": [
            {"name": "Úvod a motivace", "time": "10 min", "description": "Diskutujte o dělení pizzy."},
            {"name": "Výklad", "time": "20 min", "description": "Vysvětlete čitatel a jmenovatel."},
            {"name": "Procvičení", "time": "15 min", "description": "Pracujte ve skupinách na příkladech."},
        ],
    }
