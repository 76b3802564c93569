# module backend.banks.models
"""Schémas d'entrée (pydantic) des endpoints admin des banques."""
from typing import Optional
from pydantic import BaseModel, Field, field_validator


def _blank_to_none(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip()
    return v or None


class BankCreate(BaseModel):
    name: str = Field(min_length=1)
    code: str = Field(min_length=1)
    account_number: str = Field(min_length=1)
    account_name: str = Field(min_length=1)
    logo: Optional[str] = None
    is_active: bool = True

    @field_validator("logo")
    def logo_blank(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)

    @field_validator("code")
    def code_upper(cls, v: str) -> str:
        return v.strip().upper()


class BankUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    code: Optional[str] = Field(default=None, min_length=1)
    account_number: Optional[str] = Field(default=None, min_length=1)
    account_name: Optional[str] = Field(default=None, min_length=1)
    logo: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("logo")
    def logo_blank(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)

    @field_validator("code")
    def code_upper(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().upper() if v else v


class SingleBankModeRequest(BaseModel):
    enabled: bool
    default_bank_id: Optional[str] = None


class DefaultBankRequest(BaseModel):
    bank_id: str = Field(min_length=1)
