"""
Validation of client-supplied industry payloads.

Used when a user picks a classification by hand (or edits one) and the
result has to be persisted on their record. Type guards return a bool;
``validate_*`` functions return a cleaned model or raise
IndustryValidationError naming the offending field.
"""

from datetime import datetime
from typing import Any, Mapping, Optional

from industry_inference.models.enums import ClassificationSource
from industry_inference.models.industry_models import IndustryLevel, UserIndustryData
from industry_inference.taxonomy.taxonomy import IndustryTaxonomy
from industry_inference.validation.exceptions import IndustryValidationError


def _get(value: Any, name: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(name)
    return getattr(value, name, None)


def validate_industry_level(value: Any, field: str = "industry_level") -> IndustryLevel:
    """Check ``{id, label}`` are non-blank strings; both are trimmed."""
    if isinstance(value, IndustryLevel):
        return value
    if not isinstance(value, Mapping):
        raise IndustryValidationError(field, "must be an object with id and label")

    node_id, label = value.get("id"), value.get("label")
    if not isinstance(node_id, str) or not node_id.strip():
        raise IndustryValidationError(f"{field}.id", "must be a non-empty string")
    if not isinstance(label, str) or not label.strip():
        raise IndustryValidationError(f"{field}.label", "must be a non-empty string")
    return IndustryLevel(id=node_id.strip(), label=label.strip())


def is_valid_industry_level(value: Any) -> bool:
    try:
        validate_industry_level(value)
    except IndustryValidationError:
        return False
    return True


def validate_user_industry_data(
    value: Any, taxonomy: Optional[IndustryTaxonomy] = None
) -> UserIndustryData:
    """
    Validate a ``UserIndustryData``-shaped payload.

    Args:
        value: Mapping (e.g. a JSON body) or UserIndustryData
        taxonomy: When given, the path must also exist in the taxonomy

    Returns:
        Cleaned UserIndustryData

    Raises:
        IndustryValidationError: First offending field
    """
    if not isinstance(value, (Mapping, UserIndustryData)):
        raise IndustryValidationError("data", "must be an object")

    raw = _get(value, "raw")
    if not isinstance(raw, str):
        raise IndustryValidationError("raw", "must be a string")
    normalized = _get(value, "normalized")
    if not isinstance(normalized, str):
        raise IndustryValidationError("normalized", "must be a string")

    category = validate_industry_level(_get(value, "category"), "category")
    segment = validate_industry_level(_get(value, "segment"), "segment")
    niche_value = _get(value, "niche")
    niche = validate_industry_level(niche_value, "niche") if niche_value is not None else None

    confidence = _get(value, "confidence")
    if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
        raise IndustryValidationError("confidence", "must be a number")
    if not 0 <= confidence <= 100:
        raise IndustryValidationError("confidence", "must be between 0 and 100")

    source = _get(value, "source")
    try:
        source = ClassificationSource(source)
    except ValueError:
        raise IndustryValidationError(
            "source", f"must be one of {[s.value for s in ClassificationSource]}"
        ) from None

    updated_at = _get(value, "updated_at")
    if updated_at is None and isinstance(value, Mapping):
        updated_at = value.get("updatedAt")
    if updated_at is not None and not isinstance(updated_at, (datetime, str)):
        raise IndustryValidationError("updated_at", "must be a datetime")

    if taxonomy is not None:
        if taxonomy.find_category(category.id) is None:
            raise IndustryValidationError("category", f"unknown category '{category.id}'")
        if taxonomy.find_segment(category.id, segment.id) is None:
            raise IndustryValidationError("segment", f"unknown segment '{segment.id}'")
        if niche is not None and taxonomy.find_niche(category.id, segment.id, niche.id) is None:
            raise IndustryValidationError("niche", f"unknown niche '{niche.id}'")

    try:
        return UserIndustryData(
            raw=raw,
            normalized=normalized,
            category=category,
            segment=segment,
            niche=niche,
            confidence=round(confidence),
            source=source,
            updated_at=updated_at,
        )
    except ValueError as e:
        # pydantic rejects unparseable timestamp strings
        raise IndustryValidationError("updated_at", str(e)) from e


def is_valid_user_industry_data(value: Any, taxonomy: Optional[IndustryTaxonomy] = None) -> bool:
    try:
        validate_user_industry_data(value, taxonomy)
    except IndustryValidationError:
        return False
    return True
