"""Pydantic schemas for the volume discount function."""

from typing import Optional

from pydantic import BaseModel, Field

from core.discounts.models import DiscountConfiguration, DiscountRecord, LoadedDiscount


class VolumeDiscountConfiguration(DiscountConfiguration):
    """Read by the discount function from the ``function-configuration`` metafield."""

    quantity: int = Field(1, ge=1)
    percentage: float = 0.0


VolumeDiscountRecord = DiscountRecord[VolumeDiscountConfiguration]
LoadedVolumeDiscount = LoadedDiscount[VolumeDiscountConfiguration]


class LoaderResponse(BaseModel):
    discount: Optional[LoadedVolumeDiscount] = None


class ActionResponse(BaseModel):
    errors: list[dict] = Field(default_factory=list)
    failure: Optional[str] = None
