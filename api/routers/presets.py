"""Filter presets API router.

Read-only endpoints for the built-in use-case presets defined in
config/presets.yaml.
"""

from fastapi import APIRouter, HTTPException

from api.models.schemas import FilterPresetModel, PresetDetail
from src.filtering import UnknownPresetError, encode, get_builtin_presets, get_preset

router = APIRouter()


@router.get("", response_model=list[FilterPresetModel])
async def list_presets():
    """List all built-in presets."""
    return [preset.to_dict() for preset in get_builtin_presets().values()]


@router.get("/{preset_id}", response_model=PresetDetail)
async def get_preset_detail(preset_id: str):
    """Get a preset with the FilterState it resolves to today."""
    try:
        preset = get_preset(preset_id)
    except UnknownPresetError as e:
        raise HTTPException(status_code=404, detail=str(e))

    state = preset.resolve()
    return {
        **preset.to_dict(),
        "resolved": state.to_dict(),
        "query": encode(state),
    }
