"""Unit tests for the taxonomy tree and the data-driven table loaders."""

import json

import pytest

from industry_inference.models.enums import SeedMatchType
from industry_inference.taxonomy.rules import load_ambiguous_terms, load_ontology, load_seed_rules
from industry_inference.taxonomy.taxonomy import IndustryTaxonomy


SMALL_TAXONOMY = {
    "fallback": {"category": "other", "segment": "unclassified"},
    "categories": [
        {
            "id": "tech",
            "label": "科技互联网",
            "segments": [
                {"id": "software_dev", "label": "软件开发", "niches": [{"id": "backend", "label": "后端开发"}]},
                {"id": "product", "label": "产品"},
            ],
        },
        {"id": "other", "label": "其他", "segments": [{"id": "unclassified", "label": "未分类"}]},
    ],
}


@pytest.fixture
def small_taxonomy():
    return IndustryTaxonomy(SMALL_TAXONOMY)


def test_resolve_full_path(small_taxonomy):
    path = small_taxonomy.resolve_path("tech", "software_dev", "backend")

    assert path.key == ("tech", "software_dev", "backend")
    assert path.label == "科技互联网 / 软件开发 / 后端开发"
    assert path.without_niche().key == ("tech", "software_dev", None)


@pytest.mark.parametrize(
    "category, segment, niche",
    [
        ("tech", "nope", None),
        ("nope", "software_dev", None),
        ("tech", "software_dev", "frontend"),
        ("tech", "product", "backend"),
        (None, None, None),
    ],
)
def test_unresolvable_paths(small_taxonomy, category, segment, niche):
    assert small_taxonomy.resolve_path(category, segment, niche) is None


def test_fallback_and_first_segment(small_taxonomy):
    assert small_taxonomy.fallback_path.key == ("other", "unclassified", None)
    assert small_taxonomy.first_segment_path("tech").key == ("tech", "software_dev", None)
    assert small_taxonomy.first_segment_path("missing") is None


def test_unresolvable_fallback_is_rejected():
    data = {**SMALL_TAXONOMY, "fallback": {"category": "other", "segment": "missing"}}
    with pytest.raises(ValueError):
        IndustryTaxonomy(data)


def test_tree_preserves_file_order(small_taxonomy):
    tree = small_taxonomy.tree()

    assert [c["id"] for c in tree] == ["tech", "other"]
    assert [s["id"] for s in tree[0]["segments"]] == ["software_dev", "product"]
    assert tree[0]["segments"][0]["niches"] == [{"id": "backend", "label": "后端开发"}]
    assert "niches" not in small_taxonomy.tree(include_niches=False)[0]["segments"][0]


def test_shipped_taxonomy_has_generic_fallback(taxonomy):
    assert taxonomy.fallback_path.key == ("other", "unclassified", None)
    assert len(taxonomy.category_ids) >= 10


def test_shipped_tables_resolve_completely(test_settings, taxonomy):
    """Every row in the shipped tables points at a real taxonomy node."""
    with open(test_settings.SEED_RULES_PATH, encoding="utf-8") as f:
        seed_rows = json.load(f)["rules"]
    with open(test_settings.ONTOLOGY_PATH, encoding="utf-8") as f:
        ontology_rows = json.load(f)["entries"]

    assert len(load_seed_rules(test_settings.SEED_RULES_PATH, taxonomy)) == len(seed_rows)
    assert len(load_ontology(test_settings.ONTOLOGY_PATH, taxonomy)) == len(ontology_rows)


def test_lexicon_candidates_stay_below_decisive_threshold(test_settings, taxonomy):
    lexicon = load_ambiguous_terms(test_settings.AMBIGUOUS_TERMS_PATH, taxonomy)

    assert lexicon
    for entry in lexicon:
        assert all(c.confidence < test_settings.DECISIVE_CONFIDENCE_THRESHOLD for c in entry.candidates)


def test_loader_skips_unknown_paths_and_normalizes(tmp_path, small_taxonomy):
    rules_file = tmp_path / "rules.json"
    rules_file.write_text(
        json.dumps(
            {
                "rules": [
                    {"pattern": " Java开发 ", "category": "tech", "segment": "software_dev", "confidence": 0.9},
                    {"pattern": "码农", "match": "contains", "category": "tech", "segment": "ghost", "confidence": 0.9},
                    {"pattern": "产品", "match": "contains", "category": "tech", "segment": "product", "confidence": 0.8},
                ]
            },
            ensure_ascii=False,
        ),
        encoding="utf-8",
    )

    rules = load_seed_rules(rules_file, small_taxonomy)

    assert [r.pattern for r in rules] == ["java开发", "产品"]
    assert rules[0].match_type is SeedMatchType.EXACT
    assert rules[1].match_type is SeedMatchType.CONTAINS
    assert rules[0].matches("java开发")
    assert rules[1].matches("做产品的")
