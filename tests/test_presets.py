"""Tests for the preset catalog and edit requests."""

import pytest

from prismalens.core.presets import PRESETS, get_preset, icon_for, list_presets, resolve_prompt
from prismalens.models.enums import PresetIcon, StyleId
from prismalens.models.schemas import EditRequest
from prismalens.utils.errors import EmptyPromptError, UnknownStyleError


def test_catalog_order_and_labels():
    assert [(p.style_id, p.label) for p in list_presets()] == [
        (StyleId.GHIBLI, "Ghibli Style"),
        (StyleId.QUALITY, "Enhance"),
        (StyleId.REFINE, "Refine Face"),
        (StyleId.BATMAN, "Gotham City"),
        (StyleId.POTTER, "Wizard World"),
    ]


def test_every_preset_style_has_a_prompt():
    for style in StyleId:
        if style == StyleId.CUSTOM:
            continue
        assert get_preset(style).prompt.strip()


def test_every_style_has_an_icon():
    assert {icon_for(style) for style in StyleId} <= set(PresetIcon)
    assert icon_for(StyleId.CUSTOM) == PresetIcon.MAGIC
    assert icon_for(StyleId.QUALITY) == PresetIcon.SUN


def test_custom_has_no_preset():
    with pytest.raises(UnknownStyleError):
        get_preset(StyleId.CUSTOM)


def test_unknown_style_string():
    with pytest.raises(UnknownStyleError):
        get_preset("SEPIA")


def test_list_presets_returns_a_copy():
    listed = list_presets()
    listed.clear()

    assert len(PRESETS) == 5


def test_preset_prompt_ignores_user_text():
    request = EditRequest(style_id=StyleId.REFINE, prompt_text="make me a dragon")

    assert resolve_prompt(request) == get_preset(StyleId.REFINE).prompt


def test_preset_request_allows_empty_text():
    assert EditRequest(style_id=StyleId.BATMAN).prompt_text == ""


@pytest.mark.parametrize("text", ["", " ", "\t\n"])
def test_custom_request_requires_text(text):
    with pytest.raises(EmptyPromptError):
        EditRequest(style_id=StyleId.CUSTOM, prompt_text=text)


def test_custom_prompt_is_sent_as_written():
    request = EditRequest(style_id=StyleId.CUSTOM, prompt_text="Remove the background")

    assert resolve_prompt(request) == "Remove the background"
