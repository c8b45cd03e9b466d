"""
Industry taxonomy and the data-driven tables that point into it.

- taxonomy.py: IndustryTaxonomy lookups and TaxonomyPath
- rules.py: seed rule, ontology and ambiguity lexicon loaders
"""

from industry_inference.taxonomy.rules import (
    AmbiguousTerm,
    OntologyEntry,
    SeedRule,
    load_ambiguous_terms,
    load_ontology,
    load_seed_rules,
)
from industry_inference.taxonomy.taxonomy import IndustryTaxonomy, TaxonomyPath

__all__ = [
    "IndustryTaxonomy",
    "TaxonomyPath",
    "SeedRule",
    "OntologyEntry",
    "AmbiguousTerm",
    "load_seed_rules",
    "load_ontology",
    "load_ambiguous_terms",
]
