"""
Reasoning strings attached to every classification and candidate.

The UI shows these verbatim, so they are short Chinese sentences naming
what was matched and where it landed in the taxonomy.
"""

from typing import Optional, Sequence

from industry_inference.models.enums import ClassificationSource
from industry_inference.taxonomy.taxonomy import TaxonomyPath


def seed_reasoning(pattern: str, path: TaxonomyPath) -> str:
    return f"匹配职业关键词「{pattern}」，归入{path.label}"


def fuzzy_seed_reasoning(pattern: str, distance: int, path: TaxonomyPath) -> str:
    return f"与职业关键词「{pattern}」近似（相差{distance}个字符），归入{path.label}"


def ontology_reasoning(terms: Sequence[str], path: TaxonomyPath) -> str:
    shown = "、".join(f"「{t}」" for t in list(terms)[:3])
    return f"描述中包含{shown}，对应{path.label}"


def ai_reasoning(path: TaxonomyPath) -> str:
    return f"AI 根据描述推断为{path.label}"


def fallback_reasoning(path: TaxonomyPath, hint: Optional[str] = None) -> str:
    if hint:
        return f"无法确定具体行业，参考「{hint}」暂归入{path.label}，建议手动确认"
    return f"无法确定具体行业，暂归入{path.label}，建议手动选择"


def candidate_reasoning(path: TaxonomyPath) -> str:
    return f"可能属于{path.label}"


def generate_reasoning(
    source: ClassificationSource,
    path: TaxonomyPath,
    *,
    pattern: Optional[str] = None,
    terms: Sequence[str] = (),
    distance: int = 0,
) -> str:
    """Build a reasoning string for ``source`` when the tier gave none."""
    if source is ClassificationSource.SEED and pattern:
        if distance:
            return fuzzy_seed_reasoning(pattern, distance, path)
        return seed_reasoning(pattern, path)
    if source is ClassificationSource.ONTOLOGY and terms:
        return ontology_reasoning(terms, path)
    if source is ClassificationSource.AI:
        return ai_reasoning(path)
    if source is ClassificationSource.FALLBACK:
        return fallback_reasoning(path)
    return candidate_reasoning(path)


def ensure_reasoning(reasoning: Optional[str], source: ClassificationSource, path: TaxonomyPath) -> str:
    """Keep a non-blank reasoning as is, otherwise generate one."""
    if reasoning and reasoning.strip():
        return reasoning.strip()
    return generate_reasoning(source, path)
