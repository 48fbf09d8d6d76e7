"""Material Engine Config Package"""
from .settings import (
    MaterialEngineConfig, MaterialTypeConfig,
    MATERIAL_TYPE_CONFIGS, DEFAULT_MATERIAL_TYPE_CONFIG,
    get_config_for_material_type,
)

__all__ = [
    'MaterialEngineConfig', 'MaterialTypeConfig',
    'MATERIAL_TYPE_CONFIGS', 'DEFAULT_MATERIAL_TYPE_CONFIG',
    'get_config_for_material_type',
]
