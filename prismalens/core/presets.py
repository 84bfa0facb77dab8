"""Static catalog of edit style presets."""

from typing import Dict, List

from ..models.enums import PresetIcon, StyleId
from ..models.schemas import EditRequest, Preset
from ..utils.errors import UnknownStyleError


PRESETS: List[Preset] = [
    Preset(
        style_id=StyleId.GHIBLI,
        label="Ghibli Style",
        description="Turn into anime art",
        icon=PresetIcon.SPARKLES,
        accent="from-green-400 to-emerald-600",
        prompt=(
            "Transform this image into a high-quality Studio Ghibli style anime scene. "
            "Maintain the composition and key subjects but render them with the signature "
            "vibrant colors, fluffy clouds, and hand-drawn aesthetic of Ghibli movies."
        ),
    ),
    Preset(
        style_id=StyleId.QUALITY,
        label="Enhance",
        description="Boost clarity & detail",
        icon=PresetIcon.SUN,
        accent="from-blue-400 to-indigo-600",
        prompt=(
            "Significantly enhance the quality of this image. Increase resolution, "
            "sharpness, and clarity. Remove noise and artifacts. Make it look like a "
            "professional high-definition photograph."
        ),
    ),
    Preset(
        style_id=StyleId.REFINE,
        label="Refine Face",
        description="Smooth & beautify",
        icon=PresetIcon.WAND,
        accent="from-pink-400 to-rose-600",
        prompt=(
            "Retouch the facial features in this image. Smooth the skin naturally while "
            "preserving texture and details. Enhance lighting on the face for a "
            "professional portrait look."
        ),
    ),
    Preset(
        style_id=StyleId.BATMAN,
        label="Gotham City",
        description="Dark cinematic look",
        icon=PresetIcon.GHOST,
        accent="from-slate-700 to-black",
        prompt=(
            "Apply a dark, gritty, cinematic Batman-style aesthetic to this image. High "
            "contrast, shadows, rain effects if appropriate, cool color temperature, and "
            "a dramatic, brooding atmosphere."
        ),
    ),
    Preset(
        style_id=StyleId.POTTER,
        label="Wizard World",
        description="Magical effects",
        icon=PresetIcon.ZAP,
        accent="from-amber-400 to-orange-600",
        prompt=(
            "Transform this image with a Harry Potter wizarding world aesthetic. Add "
            "magical glows, floating particles, vintage coloring, and a mysterious, "
            "enchanted atmosphere."
        ),
    ),
]

_BY_STYLE: Dict[StyleId, Preset] = {preset.style_id: preset for preset in PRESETS}

# Every style, including custom, has exactly one icon
STYLE_ICONS: Dict[StyleId, PresetIcon] = {
    **{preset.style_id: preset.icon for preset in PRESETS},
    StyleId.CUSTOM: PresetIcon.MAGIC,
}

_missing = set(StyleId) - set(STYLE_ICONS)
if _missing:
    raise RuntimeError(f"Styles without an icon: {sorted(s.value for s in _missing)}")

_uncatalogued = set(StyleId) - set(_BY_STYLE) - {StyleId.CUSTOM}
if _uncatalogued:
    raise RuntimeError(f"Styles without a preset: {sorted(s.value for s in _uncatalogued)}")


def list_presets() -> List[Preset]:
    """Presets in display order."""
    return list(PRESETS)


def get_preset(style_id: StyleId) -> Preset:
    """
    Look up the preset for a style.

    Raises:
        UnknownStyleError: For CUSTOM or an unknown identifier
    """
    try:
        return _BY_STYLE[StyleId(style_id)]
    except (KeyError, ValueError):
        raise UnknownStyleError(f"No preset for style {style_id!r}")


def icon_for(style_id: StyleId) -> PresetIcon:
    return STYLE_ICONS[StyleId(style_id)]


def resolve_prompt(request: EditRequest) -> str:
    """
    Text sent to the provider for a request.

    Presets always use their catalog prompt; the user's text only matters
    for custom edits.
    """
    if request.style_id == StyleId.CUSTOM:
        return request.prompt_text
    return get_preset(request.style_id).prompt
