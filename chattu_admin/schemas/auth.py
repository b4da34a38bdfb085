from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AdminLoginRequest(BaseModel):
    """Admin login request with the shared secret key."""
    model_config = ConfigDict(populate_by_name=True)

    secret_key: Any = Field(default=None, alias="secretKey")  # Non-strings are rejected at login


class StatusMessage(BaseModel):
    """Generic success/failure response."""
    success: bool
    message: str


class AdminStatus(BaseModel):
    """Admin session confirmation."""
    admin: bool = True
