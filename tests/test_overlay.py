import pytest
from PIL import ImageFont

from app.services.overlay_service import (
    OverlaySynthesizer,
    estimate_anchor_width,
    estimate_layer_size,
)


def test_layer_size_estimate():
    assert estimate_layer_size("Piktor", 40) == (168, 52)
    assert estimate_anchor_width("Piktor", 40) == 144


def test_synthesize_uses_estimated_canvas(settings):
    layer = OverlaySynthesizer(settings).synthesize("Piktor", 40, 0.6)

    assert (layer.width, layer.height) == (168, 52)
    assert layer.image.size == (168, 52)
    assert layer.image.mode == "RGBA"


def test_synthesize_respects_opacity(settings):
    layer = OverlaySynthesizer(settings).synthesize("Piktor", 40, 0.6)
    _, max_alpha = layer.image.getchannel("A").getextrema()

    assert 0 < max_alpha <= 153


def test_synthesize_clamps_opacity(settings):
    layer = OverlaySynthesizer(settings).synthesize("Piktor", 40, 5.0)
    _, max_alpha = layer.image.getchannel("A").getextrema()

    assert 0 < max_alpha <= 255


def test_empty_text_gives_degenerate_layer(settings):
    layer = OverlaySynthesizer(settings).synthesize("", 40, 0.6)

    assert layer.width == 0
    assert layer.is_empty


def test_missing_font_path_falls_back(settings, tmp_path):
    settings.font_path = tmp_path / "missing.ttf"
    layer = OverlaySynthesizer(settings).synthesize("Hi", 20, 1.0)

    assert layer.image.getbbox() is not None


def test_text_sits_on_baseline_at_font_size(settings):
    synthesizer = OverlaySynthesizer(settings)
    if not isinstance(synthesizer._load_font(40), ImageFont.FreeTypeFont):
        pytest.skip("bitmap fonts do not support baseline anchors")

    layer = synthesizer.synthesize("Piktor", 40, 1.0)
    left, top, right, bottom = layer.image.getbbox()

    assert top > 0
    assert 30 < bottom <= 40 + 3


def test_fractional_font_size(settings):
    layer = OverlaySynthesizer(settings).synthesize("Piktor", 40.5, 1.0)

    assert (layer.width, layer.height) == estimate_layer_size("Piktor", 40.5)
    assert layer.image.getbbox() is not None
