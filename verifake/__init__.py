"""
VeriFake Detection API — Source Package
========================================

Core modules for the fake social account detection demo service:
    - main.py     : FastAPI application factory, routes and error handlers
    - service.py  : Request orchestration (analyze, dashboard, admin operations)
    - detector.py : Placeholder scoring heuristic for account URLs
    - storage.py  : Thread-safe in-memory entity store with startup seed data
    - models.py   : Pydantic entity records and request/response schemas
    - errors.py   : Service error hierarchy mapped to HTTP responses
    - config.py   : Environment-driven settings
"""
