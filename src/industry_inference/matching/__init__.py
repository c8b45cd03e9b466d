"""
Deterministic local matching tiers.

- text_utils.py: input normalization and edit distance
- seed_matcher.py: ordered seed rules with a fuzzy tier
- ontology_matcher.py: keyword/position scoring per taxonomy path
- ambiguity.py: ambiguity lexicon and candidate ranking
- reasoning.py: human-readable reasoning strings
"""
