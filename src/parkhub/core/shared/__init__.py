"""Shared result type and validation helpers."""

from .results import OperationResult
from .validation import is_missing, require, present, parse_payload

__all__ = ["OperationResult", "is_missing", "require", "present", "parse_payload"]
