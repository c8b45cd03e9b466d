"""
Integration tests for the industry inference service.

Test components together or against real external services:
- API endpoints (FastAPI TestClient over the shipped reference tables)
- Redis classification cache (real Redis, database 15, skipped if absent)
"""
