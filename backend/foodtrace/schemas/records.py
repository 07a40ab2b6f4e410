"""Record schemas.

These are the structurally typed documents persisted by the record store.
Every collection is a list of one of these models, except settings which
is a singleton.
"""

from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Annotated, List, Optional
from uuid import uuid4

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator

HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


def new_id() -> str:
    """Generate a record identity."""
    return uuid4().hex


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


# Blank strings coming from forms or older documents mean "no date"
OptionalDate = Annotated[Optional[dt.date], BeforeValidator(_blank_to_none)]


class InboundStatus(str, Enum):
    IN_STOCK = "IN_STOCK"
    USED = "USED"
    OUT = "OUT"


class ComponentType(str, Enum):
    INGREDIENT = "INGREDIENT"
    PACKAGING = "PACKAGING"


class Slot(str, Enum):
    MORNING = "MORNING"
    EVENING = "EVENING"


class Frequency(str, Enum):
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"


class AppSettings(BaseModel):
    """Singleton settings document."""

    company: str = "L'Olivette Camarguaise"
    operator: str = ""
    temp_morning: str = Field("08:00", pattern=HHMM_PATTERN)
    temp_evening: str = Field("18:00", pattern=HHMM_PATTERN)
    dlc_warn_days: int = Field(7, ge=0)


class CatalogueProduct(BaseModel):
    id: str = Field(default_factory=new_id)
    name: str
    brand: str = ""
    supplier: str = ""


class InboundItem(BaseModel):
    """A received ingredient or packaging lot."""

    id: str = Field(default_factory=new_id)
    created_at: dt.datetime
    name: str
    brand: str = ""
    supplier: str = ""
    lot_number: str = ""
    expiry: OptionalDate = None
    status: InboundStatus = InboundStatus.IN_STOCK
    photo: str = ""


class Component(BaseModel):
    """Ingredient or packaging used in a production lot."""

    id: str = Field(default_factory=new_id)
    type: ComponentType = ComponentType.INGREDIENT
    name: str
    brand: str = ""
    lot_number: str = ""
    expiry: OptionalDate = None
    photo: str = ""


class ProductionLot(BaseModel):
    """Finished-product lot, in progress (draft) or finalized."""

    id: str = Field(default_factory=new_id)
    lot_code: str
    date: dt.date
    time: str = Field(pattern=HHMM_PATTERN)
    finished_name: str
    quantity: str = ""
    expiry: OptionalDate = None
    operator: str = ""
    components: List[Component] = Field(default_factory=list)
    notes: str = ""


class RefrigerationUnit(BaseModel):
    """Cold room or fridge with its tolerance band in degrees Celsius."""

    id: str = Field(default_factory=new_id)
    name: str
    min_temp: float = Field(allow_inf_nan=False)
    max_temp: float = Field(allow_inf_nan=False)

    @model_validator(mode="after")
    def check_band(self) -> "RefrigerationUnit":
        if self.min_temp > self.max_temp:
            raise ValueError(
                f"min_temp ({self.min_temp}) must not exceed max_temp ({self.max_temp})"
            )
        return self


class UnitReading(BaseModel):
    """One unit's observed value inside a temperature reading.

    ``value`` is None when nothing was recorded for the unit; ``ok`` is then
    None as well (neither compliant nor non-compliant).
    """

    unit_id: str
    unit_name: str
    min_temp: float = Field(allow_inf_nan=False)
    max_temp: float = Field(allow_inf_nan=False)
    value: Optional[float] = None
    ok: Optional[bool] = None
    corrective_action: str = ""

    @property
    def recorded(self) -> bool:
        return self.value is not None


class TemperatureReading(BaseModel):
    """Morning or evening reading batch for one date."""

    id: str = Field(default_factory=new_id)
    date: dt.date
    slot: Slot
    created_at: dt.datetime
    note: str = ""
    readings: List[UnitReading] = Field(default_factory=list)


class CleaningArea(BaseModel):
    id: str = Field(default_factory=new_id)
    name: str
    frequency: Frequency = Frequency.DAILY


class CleaningLog(BaseModel):
    """Presence of a log means the area was cleaned on that date."""

    id: str = Field(default_factory=new_id)
    area_id: str
    date: dt.date
    created_at: dt.datetime

    model_config = ConfigDict(frozen=True)
