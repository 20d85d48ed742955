"""
Schemas Pydantic per le attività d'ufficio
Progetto: CRM Utenze
"""

import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class OfficeTaskCreate(BaseModel):
    """Nuova attività: nasce sempre da completare."""

    title: str = Field(..., min_length=1, max_length=255, description="Descrizione attività")

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v


class OfficeTaskUpdate(BaseModel):
    """Aggiornamento parziale: titolo e/o stato di completamento."""

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    is_completed: Optional[bool] = None

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v


class OfficeTaskRead(BaseModel):
    """Attività come presente nell'archivio."""

    model_config = ConfigDict(extra="ignore")

    id: str
    title: str = ""
    is_completed: bool = False
    created_at: Optional[datetime.datetime] = None


class OfficeTaskList(BaseModel):
    items: list[OfficeTaskRead]
    total: int
