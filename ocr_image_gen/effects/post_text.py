"""Effects applied on top of the styled text: outline, shadows and geometry.

The outline color is derived from the text color chosen in the text stage, so
these effects always run last.
"""

import numpy as np

from ocr_image_gen.colors import family_color, random_hex_color
from ocr_image_gen.effects.base import EffectKind, EffectOutput, declarations, register


def random_stroke_size():
    """Draws a stroke size in [0.8, 4.8) pixels."""
    return (np.random.rand() + 0.4) * 4 - 0.8


def random_color_shift():
    """Draws a signed channel shift for the outline color, avoiding small shifts."""
    if np.random.rand() < 0.5:
        return np.random.randint(-160, -39)
    return np.random.randint(40, 141)


def stroke_offsets(stroke_size):
    """Computes the shadow offsets approximating a circular outline.

    The angle is stepped from 0 to 2*pi in increments of `1 / stroke_size`, so
    thicker strokes get proportionally more shadow copies.

    Args:
        stroke_size (float): The radius of the outline in pixels.

    Returns:
        list[tuple[float, float]]: The `(x, y)` offset of each shadow copy.
    """
    angles = np.arange(0, 2 * np.pi, 1 / stroke_size)
    return [(np.cos(a) * stroke_size, np.sin(a) * stroke_size) for a in angles]


def stroke_shadow(color, stroke_size):
    """Renders an outline as a comma-separated `text-shadow` value."""
    return ", ".join(f"{x:.3f}px {y:.3f}px {color}" for x, y in stroke_offsets(stroke_size))


@register(EffectKind.STROKE)
def stroke(context, effect):
    text_color = context.text_color or "#000000"
    stroke_color = family_color(text_color, random_color_shift())
    stroke_size = effect.options.get("stroke_size") or random_stroke_size()
    return EffectOutput(declarations=declarations(("text-shadow", stroke_shadow(stroke_color, stroke_size))))


def random_shadow():
    """Builds one drop shadow with random offset, blur and (optionally translucent) color."""
    offset_x = np.random.randint(-5, 6)
    offset_y = np.random.randint(-5, 6)
    blur_radius = np.random.randint(0, 15)
    color = random_hex_color()
    if np.random.rand() < 0.7:
        color += f"{np.random.randint(10, 100):02x}"
    return f"{offset_x}px {offset_y}px {blur_radius}px {color}"


@register(EffectKind.TEXT_SHADOW)
def text_shadow(context, effect):
    shadows = [random_shadow() for _ in range(np.random.randint(1, 4))]
    return EffectOutput(declarations=declarations(("text-shadow", ", ".join(shadows))))


@register(EffectKind.ROTATION)
def rotation(context, effect):
    angle = (np.random.rand() - 0.5) * 14
    return EffectOutput(declarations=declarations(("rotate", f"{angle:.2f}deg")))


@register(EffectKind.TRANSFORM)
def transform(context, effect):
    vertical = (np.random.rand() - 0.5) * 55
    horizontal = (np.random.rand() - 0.5) * 45
    return EffectOutput(
        declarations=declarations(("transform", f"translate({horizontal:.2f}%, {vertical:.2f}%)"))
    )
