"""Material Engine utilities"""
from .lenient_json import (
    JSONExtractionError,
    extract_json_object,
    parse_json_object,
    as_list,
    as_str_list,
    as_str,
    as_number,
    as_dict,
    get_text,
)

__all__ = [
    "JSONExtractionError",
    "extract_json_object",
    "parse_json_object",
    "as_list",
    "as_str_list",
    "as_str",
    "as_number",
    "as_dict",
    "get_text",
]
