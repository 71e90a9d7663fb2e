"""
Feature modules for Workout Tracker.

Each feature is a self-contained module with:
- models.py - Domain records
- schemas.py - Pydantic schemas
- service logic split by concern (tracker, sources, stream)
- archive.py - Storage hand-off (optional)
"""
