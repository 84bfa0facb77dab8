"""Preset catalog endpoint."""

from typing import List
from fastapi import APIRouter
from pydantic import BaseModel

from ..core.presets import icon_for, list_presets
from ..models.enums import PresetIcon, StyleId

router = APIRouter()


class PresetResponse(BaseModel):
    style_id: StyleId
    label: str
    description: str
    icon: PresetIcon
    accent: str


@router.get("", response_model=List[PresetResponse])
async def get_presets():
    """Presets in display order. Prompt texts stay server-side."""
    return [
        PresetResponse(
            style_id=preset.style_id,
            label=preset.label,
            description=preset.description,
            icon=icon_for(preset.style_id),
            accent=preset.accent,
        )
        for preset in list_presets()
    ]
