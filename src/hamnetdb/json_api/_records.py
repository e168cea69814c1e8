"""Pydantic models for the raw records returned by the HamnetDB JSON API.

HamnetDB encodes flags as ``0`` / ``1`` (pydantic reads them as booleans)
and site coordinates as strings that may use a decimal comma.
"""

import math
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, ConfigDict, field_validator

# 0 / 1 flag; null counts as unset.
Flag = Annotated[bool, BeforeValidator(lambda v: False if v is None else v)]


def parse_decimal(value: object) -> float:
    """Parse a HamnetDB number, returning NaN when it cannot be read."""
    if value is None or isinstance(value, bool):
        return math.nan
    if isinstance(value, int | float):
        return float(value)
    text = str(value).strip()
    if "," in text:
        # German notation: "1.234,5"
        text = text.replace(".", "").replace(",", ".")
    try:
        return float(text)
    except ValueError:
        return math.nan


class _RecordBase(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int | None = None
    deleted: Flag = False
    no_check: Flag = False
    rw_maint: Flag = False
    maintainer: str | None = None
    editor: str | None = None
    version: int | None = None


class HostRecord(_RecordBase):
    ip: str
    name: str | None = None
    typ: str | None = None
    site: str | None = None
    aliases: str | None = None
    comment: str | None = None
    mac: str | None = None
    routing: Flag = False
    monitor: Flag = False
    no_ping: Flag = False


class SubnetRecord(_RecordBase):
    ip: str
    typ: str | None = None
    radioparam: str | None = None


class SiteRecord(_RecordBase):
    callsign: str
    name: str | None = None
    comment: str | None = None
    latitude: float = math.nan
    longitude: float = math.nan
    ground_asl: float = math.nan
    elevation: float = math.nan
    inactive: Flag = False

    @field_validator("latitude", "longitude", "ground_asl", "elevation", mode="before")
    @classmethod
    def _decimal(cls, value: object) -> float:
        return parse_decimal(value)
