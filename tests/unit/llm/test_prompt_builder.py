"""Unit tests for PromptBuilder."""

import pytest

from industry_inference.llm.prompt_builder import PromptBuilder
from industry_inference.models.industry_models import ClassificationCandidate


@pytest.fixture
def hints(taxonomy):
    path = taxonomy.resolve_path("finance", "pe_vc")
    return [
        ClassificationCandidate(
            category=path.category,
            segment=path.segment,
            confidence=0.6,
            reasoning="做投资最常见指 PE/VC 一级市场",
        )
    ]


def test_system_prompt_describes_output_format(prompt_builder):
    system = prompt_builder.build_system_prompt()

    assert "JSON" in system
    assert "category" in system
    assert "confidence" in system


def test_classification_prompt_lists_taxonomy_and_description(prompt_builder, taxonomy):
    prompt, metadata = prompt_builder.build_classification_prompt("做投资的")

    assert "做投资的" in prompt
    for category_id in taxonomy.category_ids:
        assert category_id in prompt
    assert metadata["locked_category"] is None
    assert metadata["hints_count"] == 0
    assert metadata["estimated_tokens"] > 0
    assert metadata["truncation_applied"] is False


def test_locked_category_restricts_taxonomy(prompt_builder):
    prompt, metadata = prompt_builder.build_classification_prompt("工程师", locked_category_id="tech")

    assert metadata["locked_category"] == "tech"
    assert "software_dev" in prompt
    assert "pe_vc" not in prompt
    assert "限定条件" in prompt


def test_unknown_locked_category_is_ignored(prompt_builder):
    _, metadata = prompt_builder.build_classification_prompt("工程师", locked_category_id="ghost")

    assert metadata["locked_category"] is None


def test_hints_are_rendered(prompt_builder, hints):
    prompt, metadata = prompt_builder.build_classification_prompt("做投资的", hints=hints)

    assert "finance/pe_vc" in prompt
    assert "0.6" in prompt
    assert metadata["hints_count"] == 1


def test_long_description_is_truncated(taxonomy, test_settings):
    builder = PromptBuilder(test_settings.PROMPT_TEMPLATES_DIR, taxonomy, max_description_length=10)

    _, metadata = builder.build_classification_prompt("我在一家做新能源的公司负责海外市场拓展。主要跑东南亚。")

    assert metadata["truncation_applied"] is True
    assert metadata["description_length"] <= 10


def test_classification_request(prompt_builder, hints):
    request, metadata = prompt_builder.build_classification_request("做投资的", hints=hints)

    assert request.json_mode is True
    assert request.system_prompt
    assert request.model == prompt_builder.default_model
    assert request.max_tokens == prompt_builder.default_max_tokens
    assert metadata["model"] == request.model


def test_classification_request_overrides(prompt_builder):
    request, _ = prompt_builder.build_classification_request(
        "医生", model="other-model", temperature=0.0, max_tokens=64
    )

    assert request.model == "other-model"
    assert request.temperature == 0.0
    assert request.max_tokens == 64


def test_normalization_request(prompt_builder):
    request = prompt_builder.build_normalization_request("在大厂写代码的～")

    assert "在大厂写代码的～" in request.prompt
    assert "normalized" in request.prompt
    assert request.temperature == 0.0
    assert request.max_tokens == prompt_builder.normalization_max_tokens
    assert request.system_prompt is None


def test_missing_templates_dir_fails_fast(tmp_path, taxonomy):
    with pytest.raises(Exception):
        PromptBuilder(tmp_path / "missing", taxonomy)
