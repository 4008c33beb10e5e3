"""ORM Models: SQLAlchemy declarative models.

Invariants:
    - All models inherit from Base (db/base.py)
    - Imported here so Base.metadata is populated before create_all or autogenerate
"""

from userkit.models.document import Document  # noqa: F401
