"""Infrastructure Layer: database access and cross-cutting concerns.

Invariants:
    - Infrastructure never imports the token codec
    - Every SQLAlchemy failure leaves this layer as StorageError
"""
