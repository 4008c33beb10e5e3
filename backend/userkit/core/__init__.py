"""Core Layer: pure domain logic, no IO, no DB.

Invariants:
    - No module in core/ imports from services/, infrastructure/, db/ or models/
    - The token codec is pure and deterministic
"""
