"""User Schemas: the account record as stored in and read from the user collection.

Invariants:
    - All four fields are required strings; presence is the only validation
    - Extra stored keys are ignored on read and never written back
"""

from pydantic import BaseModel, ConfigDict


class UserRecord(BaseModel):
    """Account record, keyed by caller-assigned id."""
    model_config = ConfigDict(extra="ignore")

    id: str
    email: str
    firstname: str
    lastname: str

    def to_document(self) -> dict:
        """Exactly the fields an upsert replaces."""
        return {
            "id": self.id,
            "email": self.email,
            "firstname": self.firstname,
            "lastname": self.lastname,
        }
