"""Text effects: glyph color, font style and font weight.

The text color depends on the background decision made by the background
stage, so these effects always run after it.
"""

from pathlib import Path

import numpy as np
from loguru import logger

from ocr_image_gen.colors import complementary_color, dominant_swatches
from ocr_image_gen.effects.base import (
    BackgroundType,
    EffectKind,
    EffectOutput,
    declarations,
    register,
)
from ocr_image_gen.readability import select_text_color

# Frequently seen real-world text colors and their relative weights
COMMON_COLORS = (
    ("#000000", 16),
    ("#ffffff", 3),
    ("#333333", 6),
    ("#666666", 5),
    ("#999999", 4),
    ("#ff0000", 2),
    ("#ff6600", 2),
    ("#ffd700", 1),
    ("#ffff00", 1),
    ("#008000", 2),
    ("#00ffff", 1),
    ("#0000ff", 2),
    ("#1e90ff", 1),
    ("#800080", 1),
    ("#ff69b4", 1),
    ("#ffa500", 2),
    ("#c0c0c0", 1),
    ("#e6e6fa", 1),
    ("#f5f5f5", 1),
    ("#b22222", 1),
    ("#ff80ed", 1),
    ("#065535", 1),
    ("#133337", 1),
    ("#ffc0cb", 1),
    ("#ffe4e1", 1),
    ("#008080", 1),
    ("#c6e2ff", 1),
    ("#b0e0e6", 1),
    ("#40e0d0", 1),
    ("#d3ffce", 1),
)

FONT_STYLES = ("italic", "oblique")
FONT_WEIGHTS = (100, 200, 300, 400, 500, 600, 700, 800, 900)
DEFAULT_BACKGROUND = "#ffffff"


def weighted_common_color():
    """Draws a color from `COMMON_COLORS` proportionally to its weight."""
    colors, weights = zip(*COMMON_COLORS)
    p = np.array(weights, dtype=float)
    return str(np.random.choice(colors, p=p / p.sum()))


def background_image_path(context):
    name = context.background.name
    if context.image_dir is None:
        return Path(name)
    return Path(context.image_dir) / name


@register(EffectKind.TEXT_COLOR)
def text_color(context, effect):
    """Chooses the glyph color from the background decision.

    On image backgrounds the three dominant swatches of the image are fed to
    the readable-color selector. On color backgrounds (or when no background
    was chosen, in which case white is assumed) the complementary color of the
    base background color is used, occasionally replaced by a common text
    color for variety.
    """
    if context.background_type == BackgroundType.IMAGE:
        swatches = dominant_swatches(background_image_path(context), count=3)
        color = select_text_color(swatches)
        logger.debug(f"Swatches {swatches} of {context.background.name} -> text color {color}")
    else:
        if context.background_type == BackgroundType.COLOR:
            base = context.background.hex
        else:
            base = DEFAULT_BACKGROUND
        color = complementary_color(base)
        if np.random.rand() < effect.options.get("common_color_probability", 0.0):
            color = weighted_common_color()

    return EffectOutput(declarations=declarations(("color", color)), text_color=color)


@register(EffectKind.FONT_STYLE)
def font_style(context, effect):
    return EffectOutput(declarations=declarations(("font-style", str(np.random.choice(FONT_STYLES)))))


@register(EffectKind.FONT_WEIGHT)
def font_weight(context, effect):
    return EffectOutput(declarations=declarations(("font-weight", str(np.random.choice(FONT_WEIGHTS)))))
