# cropmarket/models/crop_models.py

from typing import Optional

from pydantic import BaseModel, Field, field_validator

NAME_MAX = 120
LOCATION_MAX = 200
DESCRIPTION_MAX = 2000


class CropCreateModel(BaseModel):
    """Fields a farmer submits when listing a crop (form or JSON)."""
    name: str = Field(..., min_length=1, max_length=NAME_MAX)
    description: str = Field(..., min_length=1, max_length=DESCRIPTION_MAX)
    location: str = Field(..., min_length=1, max_length=LOCATION_MAX)
    price: float = Field(..., ge=0, allow_inf_nan=False, description="Price per kg")
    quantity: Optional[float] = Field(None, ge=0, allow_inf_nan=False, description="Available quantity in kg")

    @field_validator("name", "description", "location", mode="before")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("price", "quantity", mode="before")
    @classmethod
    def _reject_bool(cls, v):
        if isinstance(v, bool):
            raise ValueError("must be a number")
        return v

    @field_validator("quantity", mode="before")
    @classmethod
    def _blank_quantity(cls, v):
        # empty form inputs arrive as ""
        if isinstance(v, str) and not v.strip():
            return None
        return v


class Crop(BaseModel):
    id: str
    name: str
    description: str
    location: str
    price: float = Field(..., ge=0)
    farmer: str
    image: Optional[str] = None
    quantity: Optional[float] = Field(None, ge=0)
    createdAt: Optional[str] = None

    def total_price(self) -> Optional[float]:
        if self.quantity is None:
            return None
        return round(self.price * self.quantity, 2)
