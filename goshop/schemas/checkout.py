import datetime as dt
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field


class GuestAddress(BaseModel):
    model_config = ConfigDict(extra="forbid")

    street: str = Field(min_length=1)
    city: str = ""
    region: str = ""


class QuoteRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    delivery_date: Optional[dt.date] = None


class CheckoutRequest(BaseModel):
    """Signed-in callers pick saved records; guests send contact and payment kind."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    delivery_date: Optional[dt.date] = None
    address_id: Optional[str] = None
    payment_method_id: Optional[str] = None
    payment_kind: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[GuestAddress] = None
