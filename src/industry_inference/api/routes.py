"""
Industry inference API routes.

All classification endpoints are thin wrappers over
``IndustryClassifier.classify_industry``, which never raises; only
request-shape and user-payload validation produce error responses.
"""

from datetime import datetime, timezone
from typing import Any

import structlog
from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse

from industry_inference.api.dependencies import (
    get_industry_classifier,
    get_settings,
    get_taxonomy,
)
from industry_inference.api.models import (
    CacheClearResponse,
    CacheStatsResponse,
    ClassifyIndustryRequest,
    ClassifyIndustryResponse,
    HealthResponse,
    IndustryOption,
    ParseIndustryRequest,
    ParseIndustryResponse,
    TaxonomyResponse,
    ValidateIndustryResponse,
)
from industry_inference.classifier.orchestrator import IndustryClassifier
from industry_inference.config import Settings
from industry_inference.models.industry_models import (
    IndustryClassificationResponse,
    UserIndustryData,
)
from industry_inference.taxonomy.taxonomy import IndustryTaxonomy
from industry_inference.validation.industry_validation import validate_user_industry_data

logger = structlog.get_logger(__name__)

router = APIRouter()


def to_parse_response(result: IndustryClassificationResponse) -> ParseIndustryResponse:
    """Collapse a classification to category-level options, deduplicated by category."""
    primary = IndustryOption(
        value=result.category.id,
        label=result.category.label,
        confidence=result.confidence,
    )
    alternatives: list[IndustryOption] = []
    seen = {primary.value}
    for candidate in result.candidates or []:
        if candidate.category.id in seen:
            continue
        seen.add(candidate.category.id)
        alternatives.append(
            IndustryOption(
                value=candidate.category.id,
                label=candidate.category.label,
                confidence=candidate.confidence,
            )
        )
    return ParseIndustryResponse(primary=primary, alternatives=alternatives or None)


@router.post(
    "/parse-industry",
    response_model=ParseIndustryResponse,
    response_model_exclude_none=True,
    summary="Suggest an industry category for free text",
    responses={
        200: {"description": "Suggestion (empty object for blank input)"},
        400: {"description": "Invalid request format"},
    },
)
async def parse_industry(
    request: ParseIndustryRequest,
    classifier: IndustryClassifier = Depends(get_industry_classifier),
) -> ParseIndustryResponse:
    if not request.text.strip():
        return ParseIndustryResponse()

    result = await classifier.classify_industry(request.text)
    return to_parse_response(result)


@router.post(
    "/classify-industry",
    response_model=ClassifyIndustryResponse,
    summary="Classify an occupation description into the industry taxonomy",
    description="""
    Runs the tiered pipeline (cache, seed rules, ontology, ambiguity layer,
    AI, fallback). Ambiguous inputs carry ranked ``candidates`` for the
    user to choose from.
    """,
    responses={
        200: {"description": "Classification (always produced, possibly a fallback)"},
        400: {"description": "Invalid request format"},
    },
)
async def classify_industry(
    request: ClassifyIndustryRequest,
    classifier: IndustryClassifier = Depends(get_industry_classifier),
) -> ClassifyIndustryResponse:
    result = await classifier.classify_industry(request.description, request.context)
    return ClassifyIndustryResponse(
        classification=result,
        user_industry=UserIndustryData.from_classification(
            result, updated_at=datetime.now(timezone.utc)
        ),
    )


@router.post(
    "/validate-industry",
    response_model=ValidateIndustryResponse,
    summary="Validate a client-chosen industry record",
    responses={
        200: {"description": "Payload is valid; cleaned record returned"},
        422: {"description": "Payload invalid; response names the offending field"},
    },
)
async def validate_industry(
    payload: dict[str, Any] = Body(...),
    taxonomy: IndustryTaxonomy = Depends(get_taxonomy),
) -> ValidateIndustryResponse:
    user_industry = validate_user_industry_data(payload, taxonomy)
    return ValidateIndustryResponse(user_industry=user_industry)


@router.get(
    "/cache/stats",
    response_model=CacheStatsResponse,
    summary="Classification cache statistics",
)
async def cache_stats(
    classifier: IndustryClassifier = Depends(get_industry_classifier),
) -> CacheStatsResponse:
    stats = await classifier.cache.stats()
    return CacheStatsResponse(**stats.to_dict())


@router.delete(
    "/cache",
    response_model=CacheClearResponse,
    summary="Drop every cached classification",
)
async def clear_cache(
    classifier: IndustryClassifier = Depends(get_industry_classifier),
) -> CacheClearResponse:
    removed = await classifier.cache.clear()
    logger.info("Classification cache cleared via API", removed=removed)
    return CacheClearResponse(removed=removed)


@router.get(
    "/taxonomy",
    response_model=TaxonomyResponse,
    summary="Category / segment / niche tree",
)
async def get_taxonomy_tree(
    taxonomy: IndustryTaxonomy = Depends(get_taxonomy),
) -> TaxonomyResponse:
    fallback = taxonomy.fallback_path
    return TaxonomyResponse(
        categories=taxonomy.tree(),
        fallback={"category": fallback.category.id, "segment": fallback.segment.id},
    )


health_router = APIRouter()


@health_router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="""
    Check the health of the service and its dependencies.

    Returns status of:
    - LLM provider (``disabled`` when no API key is configured)
    - Classification cache backend

    Classification keeps working locally when either is down, so a failing
    dependency only degrades the status.
    """,
)
async def health_check(
    classifier: IndustryClassifier = Depends(get_industry_classifier),
    settings: Settings = Depends(get_settings),
):
    services: dict[str, str] = {}

    llm_client = classifier.ai_adapter.client
    if llm_client is None:
        services["llm"] = "disabled"
    else:
        try:
            services["llm"] = "ok" if await llm_client.health_check() else "unreachable"
        except Exception as e:
            services["llm"] = f"unreachable ({type(e).__name__})"

    cache_ok = await classifier.cache.health_check()
    services["cache"] = (
        f"ok ({classifier.cache.backend_name})"
        if cache_ok
        else f"unreachable ({classifier.cache.backend_name})"
    )

    degraded = any(value.startswith("unreachable") for value in services.values())
    health_status = "degraded" if degraded else "healthy"

    logger.info("Health check", status=health_status, services=services)

    response = HealthResponse(
        status=health_status,
        version=settings.APP_VERSION,
        services=services,
        timestamp=datetime.now(timezone.utc),
    )
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=response.model_dump(mode="json"),
    )
