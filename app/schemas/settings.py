"""Profile settings Pydantic schemas."""

from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.core.constants import SETTINGS_ROW_ID


class UserSettingsUpdate(BaseModel):
    """Full replace: omitted fields are cleared."""

    target_weight: Optional[float] = Field(None, gt=0, le=500, description="Target weight in kg")
    height: Optional[float] = Field(None, gt=0, lt=300, description="Height in centimetres")


class UserSettingsRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int = SETTINGS_ROW_ID
    target_weight: Optional[float] = None
    height: Optional[float] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None
