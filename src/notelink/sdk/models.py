"""Base Pydantic models for the notelink SDK.

This module provides the base model class that all SDK Pydantic models should inherit from.
It establishes consistent configuration across all models including:

- Strict field validation (no extra fields allowed)
- Immutable instances so descriptors can be shared between threads
- Consistent serialization behavior

Example:
    >>> from notelink.sdk.models import SdkBaseModel
    >>>
    >>> class Point(SdkBaseModel):
    ...     x: int
    ...     y: int = 0
    >>>
    >>> Point(x=1).model_dump()
    {'x': 1, 'y': 0}
"""

from pydantic import BaseModel, ConfigDict


class SdkBaseModel(BaseModel):
    """Base model for all notelink SDK Pydantic models.

    - extra="forbid": Rejects any fields not defined in the model
    - frozen=True: Makes instances immutable, so walker output can be reused
      across concurrent requests without locking
    """

    model_config = ConfigDict(extra="forbid", frozen=True)
