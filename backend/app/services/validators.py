"""
Validation of reasoning-service output against the extraction contract.

The service is asked to emit JSON matching ``ExtractionPayload`` but nothing
guarantees it does, so every response is parsed and checked here before a
document can reach the corpus.
"""
from __future__ import annotations
import json
from typing import Dict, Tuple

import pydantic

from backend.app.models.schemas import ExtractionPayload
from backend.app.services.exceptions import ValidationError


class ExtractionValidator:
    """
    Validator for extraction payloads.

    Only ``content`` and ``summary`` gate acceptance; sender, recipient and
    date may legitimately be unknown, and confidence is advisory.
    """

    @staticmethod
    def validate(payload: ExtractionPayload) -> Tuple[bool, Dict]:
        """
        Validate a parsed payload.

        Args:
            payload: The payload returned by the reasoning service

        Returns:
            Tuple of (is_valid, details) where details carries a ``reason``
            key when validation fails.
        """
        if not payload.content or not payload.content.strip():
            return False, {"reason": "empty_content"}
        if not payload.summary or not payload.summary.strip():
            return False, {"reason": "empty_summary"}
        return True, {}


def parse_extraction(raw: str) -> ExtractionPayload:
    """Parse service text into a validated payload or raise ValidationError."""
    try:
        data = json.loads(raw or "")
    except json.JSONDecodeError as e:
        raise ValidationError("Response is not valid JSON", {"reason": "invalid_json", "error": str(e)}) from e
    if not isinstance(data, dict):
        raise ValidationError("Response is not a JSON object", {"reason": "not_an_object"})
    try:
        payload = ExtractionPayload.model_validate(data)
    except pydantic.ValidationError as e:
        missing = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
        raise ValidationError(
            "Response does not match the extraction contract",
            {"reason": "schema_mismatch", "fields": missing},
        ) from e
    ok, info = ExtractionValidator.validate(payload)
    if not ok:
        raise ValidationError("Extraction did not pass validation", info)
    return payload
