"""Schemas — Pydantic request/response models for the HTTP boundary.

Invariants:
    - Request models validate shape and ranges before any service is called
    - Response models are built from core entities via from_entity()
"""
