"""Profiles domain schemas - Pydantic models for validation"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ...shared.validators import validate_full_name, validate_profile_phone


class ProfileUpdate(BaseModel):
    """Profile form fields"""

    full_name: str
    phone: Optional[str] = None
    email_notifications: Optional[bool] = None

    @field_validator("full_name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return validate_full_name(v)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        return validate_profile_phone(v)


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    full_name: Optional[str] = None
    phone: Optional[str] = None
    email_notifications: bool = True
