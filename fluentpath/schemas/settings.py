"""
Pydantic schemas for learner settings API.
"""

from typing import Dict

from pydantic import BaseModel


class ApiKeysUpdateRequest(BaseModel):
    """Key slots to save; omitted slots keep their stored value."""

    keys: Dict[str, str]


class ApiKeysResponse(BaseModel):
    """Every key slot, masked."""

    keys: Dict[str, str]
    message: str = ""
