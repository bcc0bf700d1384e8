"""
Services Layer

Business logic services that:
- Accept domain inputs (IDs, sessions, rosters, scores)
- Return domain outputs (models, dataclasses)
- Do NOT depend on HTTP request/response objects
- Raise pickleball.errors exceptions; routes map them to HTTP status codes
"""
