"""
Loaders for the data-driven matching tables.

Each table is a JSON file of entries pointing at taxonomy paths. Entries
whose path does not resolve against the taxonomy are skipped with a
warning so a bad row never takes the service down.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import structlog

from industry_inference.matching.text_utils import normalize_text
from industry_inference.models.enums import SeedMatchType
from industry_inference.models.industry_models import ClassificationCandidate
from industry_inference.taxonomy.taxonomy import IndustryTaxonomy, TaxonomyPath

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SeedRule:
    """One ordered ``pattern -> taxonomy path`` rule."""

    pattern: str
    match_type: SeedMatchType
    path: TaxonomyPath
    confidence: float
    occupation_id: Optional[str] = None
    occupation_name: Optional[str] = None

    def matches(self, normalized_text: str) -> bool:
        if self.match_type is SeedMatchType.EXACT:
            return normalized_text == self.pattern
        return self.pattern in normalized_text


@dataclass(frozen=True)
class OntologyEntry:
    """Keyword and position vocabulary for one taxonomy path."""

    path: TaxonomyPath
    positions: tuple[str, ...] = ()
    keywords: tuple[str, ...] = ()


@dataclass(frozen=True)
class AmbiguousTerm:
    """Lexicon entry: inputs known to be ambiguous and their candidate readings."""

    terms: tuple[str, ...]
    candidates: tuple[ClassificationCandidate, ...] = field(default_factory=tuple)


def _read_json(path: str | Path) -> dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _resolve(taxonomy: IndustryTaxonomy, entry: dict[str, Any], table: str) -> Optional[TaxonomyPath]:
    path = taxonomy.resolve_path(entry.get("category"), entry.get("segment"), entry.get("niche"))
    if path is None:
        logger.warning(
            "Skipping entry with unknown taxonomy path",
            table=table,
            category=entry.get("category"),
            segment=entry.get("segment"),
            niche=entry.get("niche"),
        )
    return path


def load_seed_rules(path: str | Path, taxonomy: IndustryTaxonomy) -> list[SeedRule]:
    """Load seed rules in file order (evaluation order)."""
    rules: list[SeedRule] = []
    for entry in _read_json(path).get("rules", []):
        resolved = _resolve(taxonomy, entry, "seed_rules")
        pattern = normalize_text(entry.get("pattern", ""))
        if resolved is None or not pattern:
            continue
        rules.append(
            SeedRule(
                pattern=pattern,
                match_type=SeedMatchType(entry.get("match", SeedMatchType.EXACT.value)),
                path=resolved,
                confidence=float(entry["confidence"]),
                occupation_id=entry.get("occupation_id"),
                occupation_name=entry.get("occupation_name"),
            )
        )

    logger.info("Seed rules loaded", count=len(rules), path=str(path))
    return rules


def load_ontology(path: str | Path, taxonomy: IndustryTaxonomy) -> list[OntologyEntry]:
    entries: list[OntologyEntry] = []
    for entry in _read_json(path).get("entries", []):
        resolved = _resolve(taxonomy, entry, "ontology")
        if resolved is None:
            continue
        entries.append(
            OntologyEntry(
                path=resolved,
                positions=tuple(p for p in map(normalize_text, entry.get("positions", [])) if p),
                keywords=tuple(k for k in map(normalize_text, entry.get("keywords", [])) if k),
            )
        )

    logger.info("Ontology loaded", count=len(entries), path=str(path))
    return entries


def load_ambiguous_terms(path: str | Path, taxonomy: IndustryTaxonomy) -> list[AmbiguousTerm]:
    lexicon: list[AmbiguousTerm] = []
    for entry in _read_json(path).get("terms", []):
        candidates = []
        for raw in entry.get("candidates", []):
            resolved = _resolve(taxonomy, raw, "ambiguous_terms")
            if resolved is None:
                continue
            candidates.append(
                ClassificationCandidate(
                    category=resolved.category,
                    segment=resolved.segment,
                    niche=resolved.niche,
                    confidence=float(raw["confidence"]),
                    reasoning=raw.get("reasoning") or f"可能属于{resolved.label}",
                    occupation_name=raw.get("occupation_name"),
                )
            )
        terms = tuple(t for t in map(normalize_text, entry.get("terms", [])) if t)
        if terms and candidates:
            lexicon.append(AmbiguousTerm(terms=terms, candidates=tuple(candidates)))

    logger.info("Ambiguity lexicon loaded", count=len(lexicon), path=str(path))
    return lexicon
