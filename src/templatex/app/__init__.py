"""App layer: HTTP 서빙 (FastAPI)."""
