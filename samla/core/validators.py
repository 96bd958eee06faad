#!/usr/bin/env python3
"""
validators.py
--------------------
Input validation and normalization shared by the managers, the search
compiler and the asset coordinator.

Every check here runs before any store or filesystem access.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from .exceptions import ValidationError

ELEMENT_KINDS = ("stempel", "stanze")
"""Allowed element kinds; an element may also leave its kind unspecified."""


class DataValidator:
    """Centralized validation for catalog operations."""

    @staticmethod
    def validate_required_fields(
        data: Dict[str, Any], required_fields: List[str]
    ) -> None:
        """
        Validate that required fields are present and non-blank.

        Raises:
            ValidationError: If a field is missing, None or whitespace only
        """
        for field in required_fields:
            value = data.get(field)
            if isinstance(value, str):
                value = value.strip()
            if not value:
                raise ValidationError(f"Required field '{field}' missing or empty")

    @staticmethod
    def normalize_string(value: Any) -> Optional[str]:
        """
        Trim a value to a string.

        Returns:
            The stripped string, or None for None and blank input
        """
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @staticmethod
    def normalize_lower(value: Any) -> Optional[str]:
        """Trim and lower-case a value; None for blank input."""
        text = DataValidator.normalize_string(value)
        return text.lower() if text else None

    @staticmethod
    def require_string(value: Any, label: str) -> str:
        """
        Normalize a required string.

        Raises:
            ValidationError: If the value is blank
        """
        text = DataValidator.normalize_string(value)
        if not text:
            raise ValidationError(f"{label} is required")
        return text

    @staticmethod
    def validate_id(value: Any, label: str = "id") -> int:
        """
        Validate a surrogate key.

        Raises:
            ValidationError: If the value is not a positive integer
        """
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ValidationError(f"{label} must be a positive integer, got {value!r}")
        return value

    @staticmethod
    def normalize_element_kind(value: Any) -> Optional[str]:
        """
        Normalize an element kind.

        Returns:
            One of ELEMENT_KINDS, or None when unspecified

        Raises:
            ValidationError: For any other value
        """
        kind = DataValidator.normalize_lower(value)
        if kind is None:
            return None
        if kind not in ELEMENT_KINDS:
            raise ValidationError(
                f"Invalid element kind '{kind}' (expected one of: {', '.join(ELEMENT_KINDS)})"
            )
        return kind

    @staticmethod
    def normalize_tag_names(names: Iterable[Any]) -> List[str]:
        """
        Normalize a list of tag names: trimmed, lower-cased, blanks and
        duplicates dropped, first occurrence order kept.

        Raises:
            ValidationError: If a tag contains a comma
        """
        result: List[str] = []
        for name in names:
            tag = DataValidator.normalize_lower(name)
            if not tag:
                continue
            if "," in tag:
                raise ValidationError(f"Tag may not contain commas: '{tag}'")
            if tag not in result:
                result.append(tag)
        return result
