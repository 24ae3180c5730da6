"""Structural Validator - turns a raw generation payload into a ``TailoredDocument``.

This is the only place raw payloads are coerced (strings to lists, skill
mappings to groups). Anything still malformed after coercion is rejected.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from resumemate.errors import DocumentValidationError
from resumemate.models.document import TailoredDocument
from resumemate.models.raw import RawSuggestions
from resumemate.utils.json_parser import extract_json_object

logger = logging.getLogger(__name__)

MAX_REPORTED_ISSUES = 3


def validate_document(raw: dict | str) -> TailoredDocument:
    """Validate ``raw`` (dict or JSON text). Raises DocumentValidationError."""
    if isinstance(raw, str):
        try:
            raw = extract_json_object(raw)
        except ValueError as e:
            raise DocumentValidationError("Output is not a JSON object", [str(e)[:200]]) from e
    if not isinstance(raw, dict):
        raise DocumentValidationError(
            "Output validation failed", [f"expected an object, got {type(raw).__name__}"]
        )

    try:
        suggestions = RawSuggestions.model_validate(raw)
    except ValidationError as e:
        issues = [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in e.errors()[:MAX_REPORTED_ISSUES]
        ]
        logger.warning("Output validation failed: %s", issues)
        raise DocumentValidationError(f"Output validation failed: {issues[0]}", issues) from e

    return suggestions.to_document()
