"""
Industry Inference Service for the JoyJoin meetup platform.

Maps free-text occupation descriptions onto a three-level industry taxonomy:
- Category (e.g. finance)
- Segment (e.g. pe_vc)
- Niche (e.g. venture_capital, optional)

Architecture: FastAPI service + tiered matching (seed rules, ontology,
ambiguity defense) + LLM fallback with staged validation + TTL cache
"""

__version__ = "0.1.0"
