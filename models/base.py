"""
Base schemas for all models.

Import models carry raw CSV headers as dictionary keys and field values, so
strings are never trimmed on validation: a header must round-trip exactly as
it appeared in the uploaded file.
"""

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """
    Base for all schemas.

    Features:
        - Validate on attribute assignment
        - Allow ORM objects (from_attributes)
    """
    model_config = ConfigDict(
        from_attributes=True,
        validate_assignment=True
    )


class FrozenSchema(BaseModel):
    """Base for immutable, hashable registry entries."""
    model_config = ConfigDict(frozen=True)
