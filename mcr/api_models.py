from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .settings import settings


class RowConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str = Field(..., description="Field kind the host builds the row from")
    options: dict[str, Any] = Field(default_factory=dict, description="Options passed to the row field")


class ReconcilerOptions(BaseModel):
    allow_add: bool = Field(default_factory=lambda: settings.default_allow_add)
    allow_delete: bool = Field(default_factory=lambda: settings.default_allow_delete)
    delete_empty: bool = Field(default_factory=lambda: settings.default_delete_empty)


class PreviewRequest(BaseModel):
    configs: dict[str, RowConfig] = Field(..., description="Row configs by name")
    options: ReconcilerOptions = Field(default_factory=ReconcilerOptions)
    discriminator: str = Field("type", min_length=1, description="Value key naming a row's config")
    data: Any = Field(None, description="Initially bound collection data")
    submitted: Any = Field(None, description="Submitted collection data")


class RowView(BaseModel):
    key: str
    prototype: str | None
    data: Any = None


class PreviewResponse(BaseModel):
    initial_rows: list[RowView]
    submitted_rows: list[RowView]
    data: Any
    effects: list[tuple[str, str]]
