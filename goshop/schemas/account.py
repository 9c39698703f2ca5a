from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field


class AddressRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    street: str = Field(min_length=1, max_length=200)
    city: str = ""
    region: str = ""
    label: str = ""
    phone: str = ""
    is_default: bool = False


class AddressUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    street: Optional[str] = Field(default=None, min_length=1, max_length=200)
    city: Optional[str] = None
    region: Optional[str] = None
    label: Optional[str] = None
    phone: Optional[str] = None
    is_default: Optional[bool] = None


class PaymentMethodRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    kind: Literal["card", "mobile_money", "cash"]
    label: str = ""
    is_default: bool = False


class FavoriteRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    product_id: str = Field(min_length=1)
