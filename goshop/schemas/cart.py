from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator


class AddItemRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    product_id: str = Field(min_length=1)
    quantity: int = Field(default=1, ge=1, le=99)


class UpdateItemRequest(BaseModel):
    """Quantity of zero or less removes the line."""

    model_config = ConfigDict(extra="forbid")

    quantity: Optional[int] = Field(default=None, le=99)
    selected: Optional[bool] = None

    @model_validator(mode="after")
    def _something_to_change(self):
        if self.quantity is None and self.selected is None:
            raise ValueError("quantity or selected is required")
        return self


class SelectAllRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    selected: bool


class CouponRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    code: str = Field(min_length=1, max_length=32)


class GiftWrapRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    enabled: bool
    message: str = Field(default="", max_length=250)
