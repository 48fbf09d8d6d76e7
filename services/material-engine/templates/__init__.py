# Material Subtypes
from .subtypes import (
    PREDEFINED_SUBTYPES,
    PRACTICE_PROBLEMS,
    SubtypeRegistry,
    get_subtypes_for_material,
)

__all__ = [
    "PREDEFINED_SUBTYPES",
    "PRACTICE_PROBLEMS",
    "SubtypeRegistry",
    "get_subtypes_for_material",
]
