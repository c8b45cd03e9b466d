"""Unit tests for IndustryClassifier (the full tier pipeline).

The AI tier is disabled unless a test passes ``mock_llm_client``.
"""

import pytest

from industry_inference.classifier.orchestrator import classify_industry
from industry_inference.llm.exceptions import LLMTimeoutError
from industry_inference.models.enums import ClassificationSource
from industry_inference.models.industry_models import ClassificationContext


def path_of(response):
    return (response.category.id, response.segment.id, response.niche.id if response.niche else None)


# === Decisive local answers ===


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "description, expected_path",
    [
        ("医生", ("healthcare", "medical_services", "doctor")),
        ("AI工程师", ("tech", "ai_ml", "algorithm")),
        ("投资", ("finance", "pe_vc", None)),
        ("Investment", ("finance", "pe_vc", None)),
        ("PE", ("finance", "pe_vc", "private_equity")),
        ("Software Engineer", ("tech", "software_dev", None)),
        ("product manager", ("tech", "product", "product_manager")),
    ],
)
async def test_specific_inputs_are_decisive(build_classifier, description, expected_path):
    classifier = build_classifier()

    response = await classifier.classify_industry(description)

    assert path_of(response) == expected_path
    assert response.source is ClassificationSource.SEED
    assert response.confidence >= 0.8
    assert response.candidates is None
    assert not response.is_ambiguous
    assert response.reasoning


@pytest.mark.asyncio
async def test_ontology_answer(build_classifier):
    classifier = build_classifier()

    response = await classifier.classify_industry("后端开发 微服务")

    assert response.source is ClassificationSource.ONTOLOGY
    assert path_of(response) == ("tech", "software_dev", "backend")
    assert response.candidates is None


@pytest.mark.asyncio
async def test_decisive_local_answer_skips_ai(build_classifier, mock_llm_client):
    classifier = build_classifier(llm_client=mock_llm_client)

    await classifier.classify_industry("律师")

    mock_llm_client.generate.assert_not_awaited()


@pytest.mark.asyncio
async def test_occupation_id_wins(build_classifier):
    classifier = build_classifier()

    response = await classifier.classify_industry("随便写写", {"occupationId": "lawyer"})

    assert response.source is ClassificationSource.SEED
    assert path_of(response) == ("professional_services", "legal", "lawyer")


# === Ambiguous inputs ===


@pytest.mark.asyncio
@pytest.mark.parametrize("description", ["AI", "工程师", "做投资的", "富二代"])
async def test_ambiguous_inputs_offer_candidates(build_classifier, description):
    classifier = build_classifier()

    response = await classifier.classify_industry(description)

    assert response.is_ambiguous
    assert len(response.candidates) >= 2
    confidences = [c.confidence for c in response.candidates]
    assert confidences == sorted(confidences, reverse=True)
    assert all(c.reasoning for c in response.candidates)
    # Result path is the top candidate
    top = response.candidates[0]
    assert (response.category.id, response.segment.id) == (top.category.id, top.segment.id)


@pytest.mark.asyncio
async def test_engineer_candidates_span_distinct_segments(build_classifier):
    classifier = build_classifier()

    response = await classifier.classify_industry("工程师")

    segments = [(c.category.id, c.segment.id) for c in response.candidates]
    assert len(set(segments)) == len(segments)


@pytest.mark.asyncio
async def test_confident_ai_does_not_override_lexicon(build_classifier, mock_llm_client, llm_response):
    mock_llm_client.generate.return_value = llm_response(
        {"category": "tech", "segment": "ai_ml", "niche": "algorithm", "confidence": 0.95, "reasoning": "AI算法"}
    )
    classifier = build_classifier(llm_client=mock_llm_client)

    response = await classifier.classify_industry("AI")

    assert response.source is ClassificationSource.AI
    assert response.is_ambiguous
    paths = [(c.category.id, c.segment.id, c.niche.id if c.niche else None) for c in response.candidates]
    assert len(paths) == len(set(paths))
    assert response.candidates[0].confidence == pytest.approx(0.95)


@pytest.mark.asyncio
async def test_ambiguous_input_is_not_cached(build_classifier):
    classifier = build_classifier()

    await classifier.classify_industry("做投资的")
    second = await classifier.classify_industry("做投资的")

    assert second.from_cache is False
    assert (await classifier.cache.stats()).sets == 0


# === AI tier ===


@pytest.mark.asyncio
async def test_ai_answer_for_unmatched_input(build_classifier, mock_llm_client):
    classifier = build_classifier(llm_client=mock_llm_client)

    response = await classifier.classify_industry("星际旅行规划")

    assert response.source is ClassificationSource.AI
    assert path_of(response) == ("tech", "software_dev", "backend")
    assert response.reasoning == "描述指向后端开发"
    assert response.candidates is None


@pytest.mark.asyncio
async def test_low_confidence_ai_answer_keeps_candidates(build_classifier, mock_llm_client, llm_response):
    mock_llm_client.generate.return_value = llm_response(
        {"category": "public_sector", "segment": "government", "confidence": 0.6, "reasoning": "政府相关"}
    )
    classifier = build_classifier(llm_client=mock_llm_client)

    response = await classifier.classify_industry("在政府上班")

    assert response.source is ClassificationSource.AI
    assert response.is_ambiguous
    # AI answer merged with the local keyword hit on the same path
    assert len(response.candidates) == 1
    assert response.candidates[0].confidence == pytest.approx(0.7)


@pytest.mark.asyncio
async def test_local_candidates_are_sent_as_hints(build_classifier, mock_llm_client):
    classifier = build_classifier(llm_client=mock_llm_client)

    await classifier.classify_industry("做投资的")

    request = mock_llm_client.generate.call_args.args[0]
    assert "finance/pe_vc" in request.prompt


@pytest.mark.asyncio
async def test_ai_failure_falls_back(build_classifier, mock_llm_client):
    mock_llm_client.generate.side_effect = LLMTimeoutError("timeout")
    classifier = build_classifier(llm_client=mock_llm_client)

    response = await classifier.classify_industry("星际旅行规划")

    assert response.source is ClassificationSource.FALLBACK
    assert path_of(response) == ("other", "unclassified", None)
    assert response.confidence == pytest.approx(0.3)
    assert response.reasoning


@pytest.mark.asyncio
async def test_ai_invalid_output_falls_back_to_top_candidate(build_classifier, mock_llm_client, llm_response):
    mock_llm_client.generate.return_value = llm_response("这个人应该是做金融的")
    classifier = build_classifier(llm_client=mock_llm_client)

    response = await classifier.classify_industry("做投资的")

    assert response.source is ClassificationSource.FALLBACK
    assert (response.category.id, response.segment.id) == ("finance", "pe_vc")
    assert response.is_ambiguous


@pytest.mark.asyncio
async def test_fallback_uses_best_weak_match(build_classifier):
    classifier = build_classifier(DECISIVE_CONFIDENCE_THRESHOLD=0.99)

    response = await classifier.classify_industry("律师")

    assert response.source is ClassificationSource.FALLBACK
    assert response.segment.id == "legal"


# === Locked category ===


@pytest.mark.asyncio
async def test_locked_category_is_respected(build_classifier):
    classifier = build_classifier()

    response = await classifier.classify_industry("医生", {"lockedCategoryId": "tech"})

    assert response.category.id == "tech"
    assert response.source is ClassificationSource.FALLBACK
    assert (response.category.id, response.segment.id) == ("tech", "software_dev")


@pytest.mark.asyncio
async def test_locked_category_filters_candidates(build_classifier):
    classifier = build_classifier()

    response = await classifier.classify_industry(
        "工程师", ClassificationContext(locked_category_id="tech")
    )

    assert response.category.id == "tech"
    assert {c.category.id for c in response.candidates} == {"tech"}


# === Cache ===


@pytest.mark.asyncio
async def test_repeat_call_is_served_from_cache(build_classifier):
    classifier = build_classifier()

    first = await classifier.classify_industry("医生")
    second = await classifier.classify_industry("  医生 ")

    assert first.from_cache is False
    assert second.from_cache is True
    assert path_of(second) == path_of(first)
    assert second.source is first.source
    assert second.confidence == first.confidence
    assert second.processing_time_ms < 50


@pytest.mark.asyncio
async def test_context_is_part_of_cache_key(build_classifier):
    classifier = build_classifier()

    await classifier.classify_industry("医生")
    response = await classifier.classify_industry("医生", {"source": "edit_profile"})

    assert response.from_cache is False


@pytest.mark.asyncio
async def test_fallback_is_not_cached(build_classifier):
    classifier = build_classifier()

    await classifier.classify_industry("星际旅行规划")
    second = await classifier.classify_industry("星际旅行规划")

    assert second.source is ClassificationSource.FALLBACK
    assert second.from_cache is False


# === Edge cases ===


@pytest.mark.asyncio
@pytest.mark.parametrize("description", ["", "   ", None])
async def test_blank_input(build_classifier, description):
    classifier = build_classifier()

    response = await classifier.classify_industry(description)

    assert response.source is ClassificationSource.FALLBACK
    assert response.confidence == 0.0
    assert response.candidates is None
    assert path_of(response) == ("other", "unclassified", None)
    assert (await classifier.cache.stats()).sets == 0


@pytest.mark.asyncio
async def test_blank_input_with_locked_category(build_classifier):
    classifier = build_classifier()

    response = await classifier.classify_industry("", {"lockedCategoryId": "finance"})

    assert response.category.id == "finance"


@pytest.mark.asyncio
async def test_malformed_context_is_ignored(build_classifier):
    classifier = build_classifier()

    response = await classifier.classify_industry("医生", {"occupationId": ["not", "a", "string"]})

    assert response.source is ClassificationSource.SEED


@pytest.mark.asyncio
async def test_internal_error_degrades_to_fallback(build_classifier, monkeypatch):
    classifier = build_classifier()

    def explode(text):
        raise RuntimeError("broken table")

    monkeypatch.setattr(classifier.ontology_matcher, "match", explode)

    response = await classifier.classify_industry("星际旅行规划")

    assert response.source is ClassificationSource.FALLBACK
    assert response.confidence == pytest.approx(0.3)


@pytest.mark.asyncio
async def test_response_records_input_and_timing(build_classifier):
    classifier = build_classifier()

    response = await classifier.classify_industry("  ＡＩ工程师 ")

    assert response.raw_input == "  ＡＩ工程师 "
    assert response.normalized_input == "ai工程师"
    assert response.processing_time_ms >= 0


@pytest.mark.asyncio
async def test_module_level_classify_industry(build_classifier):
    classifier = build_classifier()

    response = await classify_industry("律师", classifier=classifier)

    assert response.segment.id == "legal"


@pytest.mark.asyncio
async def test_close_releases_resources(build_classifier, mock_llm_client):
    classifier = build_classifier(llm_client=mock_llm_client)

    await classifier.close()

    mock_llm_client.close.assert_awaited_once()


# === Tier boundaries ===


@pytest.mark.asyncio
@pytest.mark.parametrize("reply", [{"normalized": 123}, ["医生"], "not json"])
async def test_bad_normalization_reply_keeps_local_answer(build_classifier, mock_llm_client, llm_response, reply):
    mock_llm_client.generate.return_value = llm_response(reply)
    classifier = build_classifier(llm_client=mock_llm_client, ENABLE_AI_NORMALIZATION=True)

    response = await classifier.classify_industry("医生")

    assert response.source is ClassificationSource.SEED
    assert path_of(response) == ("healthcare", "medical_services", "doctor")
    assert response.confidence == pytest.approx(0.98)


@pytest.mark.asyncio
async def test_normalization_crash_keeps_local_answer(build_classifier, mock_llm_client):
    mock_llm_client.generate.side_effect = AttributeError("'list' object has no attribute 'get'")
    classifier = build_classifier(llm_client=mock_llm_client, ENABLE_AI_NORMALIZATION=True)

    response = await classifier.classify_industry("医生")

    assert response.source is ClassificationSource.SEED
    assert path_of(response) == ("healthcare", "medical_services", "doctor")


@pytest.mark.asyncio
@pytest.mark.parametrize("context", ["finance", 42, ["tech"]])
async def test_non_mapping_context_is_ignored(build_classifier, context):
    classifier = build_classifier()

    response = await classifier.classify_industry("医生", context)

    assert response.source is ClassificationSource.SEED
    assert path_of(response) == ("healthcare", "medical_services", "doctor")
