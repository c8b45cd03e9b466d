"""
Unit tests for the industry inference service.

Test individual components in isolation:
- Taxonomy and table loaders
- Seed, ontology and ambiguity matching
- Prompt builder and chat-completions client
- Validation stages and pipeline
- AI adapter and classifier orchestration
- Cache backends and key generation
"""
