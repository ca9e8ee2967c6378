"""Client schemas for API request/response."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, EmailStr, Field, field_validator

from src.lexoffice.models.enums import ClientStatus, Currency
from src.lexoffice.schemas.common import CamelModel, blank_to_none, require_text


class ClientCreate(CamelModel):
    """Schema for creating a client.

    Address parts arrive flat and are stored as one JSON object. ``mobile``
    wins over ``phone`` and ``description`` wins over ``notes``.
    """

    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    mobile: str | None = None
    phone: str | None = None
    organization: str | None = None
    country: str | None = None
    state: str | None = None
    city: str | None = None
    address: str | None = None
    zip_code: str | None = None
    budget: Decimal | None = Field(default=None, ge=0)
    currency: Currency = Currency.BRL
    level: str | None = None
    status: ClientStatus = ClientStatus.ACTIVE
    tags: list[str] = Field(default_factory=list)
    description: str | None = None
    notes: str | None = None
    cpf: str | None = None
    rg: str | None = None
    pis: str | None = None
    cei: str | None = None
    professional_title: str | None = None
    marital_status: str | None = None
    birth_date: date | None = None
    inss_status: str | None = None
    amount_paid: Decimal | None = Field(default=None, ge=0)
    referred_by: str | None = None
    registered_by: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return require_text(v, "name")

    @field_validator("birth_date", mode="before")
    @classmethod
    def ignore_blank_birth_date(cls, v: Any) -> Any:
        return blank_to_none(v)


class ClientUpdate(CamelModel):
    """Schema for updating a client. Only the fields sent are written."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    email: EmailStr | None = None
    phone: str | None = None
    organization: str | None = None
    address: dict[str, Any] | None = None
    budget: Decimal | None = Field(default=None, ge=0)
    currency: Currency | None = None
    level: str | None = None
    status: ClientStatus | None = None
    tags: list[str] | None = None
    notes: str | None = None
    description: str | None = None
    cpf: str | None = None
    rg: str | None = None
    pis: str | None = None
    cei: str | None = None
    professional_title: str | None = None
    marital_status: str | None = None
    birth_date: date | None = None
    inss_status: str | None = None
    amount_paid: Decimal | None = Field(default=None, ge=0)
    referred_by: str | None = None
    registered_by: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is not None:
            return require_text(v, "name")
        return v

    @field_validator("birth_date", mode="before")
    @classmethod
    def ignore_blank_birth_date(cls, v: Any) -> Any:
        return blank_to_none(v)


class ClientRead(BaseModel):
    """Schema for reading a client."""

    id: str
    name: str
    email: str
    phone: str | None = None
    organization: str | None = None
    address: Any = None
    budget: float | None = None
    currency: str | None = None
    level: str | None = None
    status: str | None = None
    tags: list[Any] | None = None
    notes: str | None = None
    description: str | None = None
    cpf: str | None = None
    rg: str | None = None
    pis: str | None = None
    cei: str | None = None
    professional_title: str | None = None
    marital_status: str | None = None
    birth_date: date | None = None
    inss_status: str | None = None
    amount_paid: float | None = None
    referred_by: str | None = None
    registered_by: str | None = None
    created_by: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    is_active: bool = True


class ClientStats(CamelModel):
    total: int = 0
    active: int = 0
    inactive: int = 0
    pending: int = 0
    this_month: int = 0
