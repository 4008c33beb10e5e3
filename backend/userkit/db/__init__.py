"""Database Infrastructure: declarative base for the document table.

Invariants:
    - Single async engine per DatabaseSessionManager
    - All sessions are async (AsyncSession)
"""
