"""Pydantic Schemas: validation for records crossing the storage boundary.

Design Decisions:
    - Separate from models: schemas are record contracts, models are persistence
"""
