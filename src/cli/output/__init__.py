"""Output formatting utilities."""

from .formatters import format_error, format_key_value, format_success, format_table, format_value
from .json_output import json_output, response_to_dict

__all__ = [
    "format_error",
    "format_key_value",
    "format_success",
    "format_table",
    "format_value",
    "json_output",
    "response_to_dict",
]
