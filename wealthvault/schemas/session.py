# wealthvault/schemas/session.py
"""Pydantic schemas for the mocked login and user preferences."""

from pydantic import BaseModel, Field, field_validator

from wealthvault.schemas.validators import validate_currency


class UserProfile(BaseModel):
    user_id: str = Field(..., description="Opaque id; send it back as X-User-Id")
    name: str
    email: str
    picture: str


class PreferencesResponse(BaseModel):
    display_currency: str
    supported_currencies: list[str]
    currency_symbol: str


class PreferencesUpdate(BaseModel):
    display_currency: str = Field(..., examples=["GBP", "USD", "EUR"])

    @field_validator("display_currency")
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        return validate_currency(v)


class LoginResponse(BaseModel):
    user: UserProfile
    preferences: PreferencesResponse


class LogoutResponse(BaseModel):
    user_id: str
    flushed: bool = Field(..., description="True if an open session was flushed and closed")
