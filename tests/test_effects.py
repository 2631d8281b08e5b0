"""Tests for the style effects.

These tests cover the probability gate shared by all effects, the
declarations every effect kind emits and the way the text color and the
outline depend on the decisions made by earlier stages.
"""

import unittest

import numpy as np
import pytest
from PIL import Image

from ocr_image_gen.colors import hex_luminance
from ocr_image_gen.effects import (
    BackgroundRender,
    BackgroundType,
    ColorBackground,
    Effect,
    EffectContext,
    EffectKind,
    ImageBackground,
    NoBackground,
    StyleDeclaration,
)
from ocr_image_gen.effects.background import background_fill, image_url, pick_render_kind
from ocr_image_gen.effects.post_text import random_stroke_size, stroke_offsets, stroke_shadow
from ocr_image_gen.effects.text import COMMON_COLORS, FONT_WEIGHTS, weighted_common_color
from ocr_image_gen.exceptions import ConfigurationError


@pytest.fixture
def context():
    """Provides a fresh context without background images."""
    return EffectContext(image_width=640, image_height=480, font_family="Vazir")


def test_probability_zero_never_applies():
    """Tests that an effect with probability 0 never fires."""
    effect = Effect(EffectKind.ROTATION, 0.0)
    assert not any(effect.should_apply() for _ in range(1000))


def test_probability_one_always_applies():
    """Tests that an effect with probability 1 always fires."""
    effect = Effect(EffectKind.ROTATION, 1.0)
    assert all(effect.should_apply() for _ in range(1000))


@pytest.mark.parametrize("probability", [-0.1, 1.5])
def test_invalid_probability(probability):
    """Tests that probabilities outside [0, 1] are rejected."""
    with pytest.raises(ValueError):
        Effect(EffectKind.STROKE, probability)


def test_effect_name():
    """Tests that effects are named after their kind."""
    assert Effect(EffectKind.TEXT_SHADOW).name == "TextShadow"


def test_style_declaration_css():
    """Tests the CSS rendering of a declaration."""
    assert StyleDeclaration("font-weight", "700").css() == "font-weight: 700;"


def test_default_context_has_no_background(context):
    """Tests that a fresh context carries no background decision."""
    assert context.background == NoBackground()
    assert context.background_type == BackgroundType.NONE
    assert context.text_color is None


class TestBackgroundEffects(unittest.TestCase):
    """Tests for the background color and background image effects."""

    def setUp(self):
        self.context = EffectContext(image_width=640, image_height=480, font_family="Vazir")

    def test_background_color(self):
        """Tests that the color effect emits a fill and a color decision."""
        for _ in range(50):
            output = Effect(EffectKind.BACKGROUND_COLOR, 1.0).synthesize(self.context)
            self.assertEqual(len(output.declarations), 1)
            self.assertEqual(output.declarations[0].property, "background")
            self.assertIsInstance(output.background, ColorBackground)
            if output.background.render_kind == BackgroundRender.SOLID:
                self.assertEqual(output.declarations[0].value, output.background.hex)
                self.assertIsNone(output.background.secondary_hex)
            else:
                self.assertIn(output.background.hex, output.declarations[0].value)
                self.assertIn(output.background.secondary_hex, output.declarations[0].value)

    def test_solid_fills_dominate(self):
        """Tests that about 60% of the color backgrounds are solid."""
        kinds = [pick_render_kind() for _ in range(2000)]
        solid = kinds.count(BackgroundRender.SOLID) / len(kinds)
        self.assertGreater(solid, 0.5)
        self.assertLess(solid, 0.7)

    def test_background_fill(self):
        """Tests the CSS value of every render kind."""
        self.assertEqual(background_fill(ColorBackground("#112233")), "#112233")
        radial = ColorBackground("#112233", "#445566", BackgroundRender.RADIAL)
        self.assertEqual(background_fill(radial), "radial-gradient(circle, #112233, #445566)")
        linear = ColorBackground("#112233", "#445566", BackgroundRender.LINEAR)
        self.assertRegex(background_fill(linear), r"^linear-gradient\(\d+deg, #112233, #445566\)$")

    def test_background_image_without_images_declines(self):
        """Tests that the image effect contributes nothing when no image exists."""
        self.assertIsNone(Effect(EffectKind.BACKGROUND_IMAGE, 1.0).synthesize(self.context))

    def test_background_image_without_images_required(self):
        """Tests that the image effect fails when images are required but missing."""
        effect = Effect(EffectKind.BACKGROUND_IMAGE, 1.0, {"require_images": True})
        with self.assertRaises(ConfigurationError):
            effect.synthesize(self.context)

    def test_background_image(self):
        """Tests that the image effect covers the container with a pool image."""
        context = EffectContext(
            image_width=640,
            image_height=480,
            font_family="Vazir",
            image_files=("a.png", "b.jpg"),
            image_dir=None,
        )
        output = Effect(EffectKind.BACKGROUND_IMAGE, 1.0).synthesize(context)
        self.assertIsInstance(output.background, ImageBackground)
        self.assertIn(output.background.name, ("a.png", "b.jpg"))
        self.assertEqual(
            [d.property for d in output.declarations], ["background-image", "background-size"]
        )
        self.assertEqual(output.declarations[0].value, f"url('{output.background.name}')")
        self.assertEqual(output.declarations[1].value, "cover")

    def test_image_url(self):
        """Tests that images inside a directory are referenced by file URI."""
        self.assertEqual(image_url("a.png"), "a.png")
        self.assertTrue(image_url("a.png", "/tmp/backgrounds").startswith("file://"))
        self.assertTrue(image_url("a.png", "/tmp/backgrounds").endswith("/tmp/backgrounds/a.png"))


def test_text_color_on_color_background_is_complementary(context):
    """Tests that the text color is the complement of the background color."""
    context = EffectContext(
        image_width=640, image_height=480, font_family="Vazir", background=ColorBackground("#123456")
    )
    effect = Effect(EffectKind.TEXT_COLOR, 1.0, {"common_color_probability": 0.0})
    output = effect.synthesize(context)
    assert output.text_color == "#edcba9"
    assert output.declarations == (StyleDeclaration("color", "#edcba9"),)


def test_text_color_without_background_assumes_white(context):
    """Tests that a missing background decision is treated as white."""
    output = Effect(EffectKind.TEXT_COLOR, 1.0).synthesize(context)
    assert output.text_color == "#000000"


def test_text_color_common_color(context):
    """Tests that the common color replaces the complement when it fires."""
    effect = Effect(EffectKind.TEXT_COLOR, 1.0, {"common_color_probability": 1.0})
    colors = {color for color, _ in COMMON_COLORS}
    for _ in range(20):
        assert effect.synthesize(context).text_color in colors


def test_weighted_common_color_favors_black():
    """Tests that black is the most frequent common color."""
    draws = [weighted_common_color() for _ in range(2000)]
    assert max(set(draws), key=draws.count) == "#000000"


def test_text_color_on_image_background(tmp_path):
    """Tests that the text color is readable against the image swatches."""
    Image.new("RGB", (64, 64), (250, 250, 250)).save(tmp_path / "light.png")
    context = EffectContext(
        image_width=640,
        image_height=480,
        font_family="Vazir",
        image_files=("light.png",),
        image_dir=tmp_path,
        background=ImageBackground("light.png", (tmp_path / "light.png").as_uri()),
    )
    output = Effect(EffectKind.TEXT_COLOR, 1.0).synthesize(context)
    assert hex_luminance(output.text_color) < 0.5


def test_font_style_and_weight(context):
    """Tests the font style and weight declarations."""
    style = Effect(EffectKind.FONT_STYLE, 1.0).synthesize(context).declarations[0]
    assert style.property == "font-style"
    assert style.value in ("italic", "oblique")
    weight = Effect(EffectKind.FONT_WEIGHT, 1.0).synthesize(context).declarations[0]
    assert weight.property == "font-weight"
    assert int(weight.value) in FONT_WEIGHTS


class TestPostTextEffects(unittest.TestCase):
    """Tests for the stroke, shadow, rotation and transform effects."""

    def setUp(self):
        self.context = EffectContext(
            image_width=640, image_height=480, font_family="Vazir", text_color="#808080"
        )

    def test_stroke_offsets(self):
        """Tests that a 2px outline is made of 13 copies on a circle of radius 2."""
        offsets = stroke_offsets(2)
        self.assertEqual(len(offsets), 13)
        for i, (x, y) in enumerate(offsets):
            self.assertAlmostEqual(x, np.cos(i * 0.5) * 2)
            self.assertAlmostEqual(y, np.sin(i * 0.5) * 2)

    def test_stroke_shadow(self):
        """Tests the text-shadow rendering of an outline."""
        shadow = stroke_shadow("#ff0000", 2)
        parts = shadow.split(", ")
        self.assertEqual(len(parts), 13)
        self.assertEqual(parts[0], "2.000px 0.000px #ff0000")

    def test_random_stroke_size(self):
        """Tests that stroke sizes lie within [0.8, 4.8)."""
        for _ in range(200):
            size = random_stroke_size()
            self.assertGreaterEqual(size, 0.8)
            self.assertLess(size, 4.8)

    def test_stroke_uses_family_of_text_color(self):
        """Tests that the outline color is the text color shifted by a large amount."""
        output = Effect(EffectKind.STROKE, 1.0, {"stroke_size": 2}).synthesize(self.context)
        declaration = output.declarations[0]
        self.assertEqual(declaration.property, "text-shadow")
        stroke_color = declaration.value.split(", ")[0].split(" ")[2]
        shift = int(stroke_color[1:3], 16) - 0x80
        self.assertTrue(shift <= -40 or shift >= 40)
        self.assertEqual(stroke_color[1:3], stroke_color[3:5])

    def test_text_shadow(self):
        """Tests that 1 to 3 drop shadows are emitted."""
        for _ in range(50):
            declaration = Effect(EffectKind.TEXT_SHADOW, 1.0).synthesize(self.context).declarations[0]
            self.assertEqual(declaration.property, "text-shadow")
            self.assertIn(len(declaration.value.split(", ")), (1, 2, 3))

    def test_rotation(self):
        """Tests that the rotation stays within 7 degrees."""
        for _ in range(50):
            declaration = Effect(EffectKind.ROTATION, 1.0).synthesize(self.context).declarations[0]
            self.assertEqual(declaration.property, "rotate")
            self.assertTrue(declaration.value.endswith("deg"))
            self.assertLessEqual(abs(float(declaration.value[:-3])), 7)

    def test_transform(self):
        """Tests that the translation stays within its ranges."""
        for _ in range(50):
            declaration = Effect(EffectKind.TRANSFORM, 1.0).synthesize(self.context).declarations[0]
            self.assertEqual(declaration.property, "transform")
            horizontal, vertical = declaration.value[len("translate(") : -1].split(", ")
            self.assertLessEqual(abs(float(horizontal[:-1])), 22.5)
            self.assertLessEqual(abs(float(vertical[:-1])), 27.5)
