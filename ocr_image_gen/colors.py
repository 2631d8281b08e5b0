"""Color utilities for the style-synthesis engine.

This module provides the color-science helpers used when choosing background
and text colors: conversions between hex, RGB and HSL, derivation of related
colors (complementary, analogous and "family" colors), perceptual luminance and
WCAG contrast ratios, and extraction of dominant swatches from a bitmap.

All hex colors are returned in lowercase `#rrggbb` form. Inputs may omit the
leading `#` and may use the 3-digit shorthand.
"""

import math
from pathlib import Path

import numpy as np
from PIL import Image


def normalize_hex(hex_color):
    """Normalizes a hex color string to the lowercase `#rrggbb` form.

    Args:
        hex_color (str): A 3- or 6-digit hex color, with or without `#`.

    Returns:
        str: The normalized color.

    Raises:
        ValueError: If the string is not a valid hex color.
    """
    color = str(hex_color).strip().lstrip("#")
    if len(color) == 3:
        color = "".join(c + c for c in color)
    if len(color) != 6:
        raise ValueError(f"Invalid hex color: {hex_color!r}")
    try:
        int(color, 16)
    except ValueError:
        raise ValueError(f"Invalid hex color: {hex_color!r}") from None
    return "#" + color.lower()


def hex_to_rgb(hex_color):
    """Converts a hex color to an `(r, g, b)` tuple of integers in [0, 255]."""
    color = normalize_hex(hex_color)[1:]
    return tuple(int(color[i : i + 2], 16) for i in (0, 2, 4))


def rgb_to_hex(r, g, b):
    """Converts RGB channels to a hex color, rounding and clamping each channel."""
    channels = [int(np.clip(round(v), 0, 255)) for v in (r, g, b)]
    return "#" + "".join(f"{v:02x}" for v in channels)


def rgb_to_hsl(r, g, b):
    """Converts RGB channels in [0, 255] to HSL.

    Returns:
        tuple[float, float, float]: Hue in degrees [0, 360), saturation and
        lightness in [0, 1].
    """
    r, g, b = r / 255, g / 255, b / 255
    max_c, min_c = max(r, g, b), min(r, g, b)
    lightness = (max_c + min_c) / 2
    if max_c == min_c:
        return 0.0, 0.0, lightness

    d = max_c - min_c
    saturation = d / (2 - max_c - min_c) if lightness > 0.5 else d / (max_c + min_c)
    if max_c == r:
        hue = (g - b) / d + (6 if g < b else 0)
    elif max_c == g:
        hue = (b - r) / d + 2
    else:
        hue = (r - g) / d + 4
    return hue * 60, saturation, lightness


def _hue_to_rgb(p, q, t):
    if t < 0:
        t += 1
    if t > 1:
        t -= 1
    if t < 1 / 6:
        return p + (q - p) * 6 * t
    if t < 1 / 2:
        return q
    if t < 2 / 3:
        return p + (q - p) * (2 / 3 - t) * 6
    return p


def hsl_to_rgb(h, s, l):
    """Converts HSL (hue in degrees, saturation and lightness in [0, 1]) to RGB.

    Returns:
        tuple[int, int, int]: The RGB channels, rounded to integers.
    """
    if s == 0:
        r = g = b = l
    else:
        h = (h % 360) / 360
        q = l * (1 + s) if l < 0.5 else l + s - l * s
        p = 2 * l - q
        r = _hue_to_rgb(p, q, h + 1 / 3)
        g = _hue_to_rgb(p, q, h)
        b = _hue_to_rgb(p, q, h - 1 / 3)
    return round(r * 255), round(g * 255), round(b * 255)


def hex_to_hsl(hex_color):
    return rgb_to_hsl(*hex_to_rgb(hex_color))


def hsl_to_hex(h, s, l):
    return rgb_to_hex(*hsl_to_rgb(h, s, l))


def complementary_color(hex_color):
    """Returns the per-channel inverse (255 - value) of a hex color.

    The inversion is its own inverse: applying it twice yields the input.
    """
    r, g, b = hex_to_rgb(hex_color)
    return rgb_to_hex(255 - r, 255 - g, 255 - b)


def family_color(hex_color, amount=20):
    """Derives a related color by shifting every channel by the same amount.

    Each channel is clamped to [0, 255] after the shift, so a near-white color
    shifted upwards stays near-white instead of wrapping around to black. This
    is used to give outlines a color visually related to the glyph color.

    Args:
        hex_color (str): The base color.
        amount (int): The signed shift applied to each channel.

    Returns:
        str: The shifted color.
    """
    r, g, b = hex_to_rgb(hex_color)
    return rgb_to_hex(r + amount, g + amount, b + amount)


def analogous_color(hex_color, degree_shift=30):
    """Rotates the hue of a color by `degree_shift` degrees.

    The rotation is performed in HSL space with the result normalized into
    [0, 360), so negative shifts are supported. Saturation and lightness are
    preserved.

    Args:
        hex_color (str): The base color.
        degree_shift (float, optional): The hue rotation in degrees. Defaults
            to 30.

    Returns:
        str: The rotated color.
    """
    h, s, l = hex_to_hsl(hex_color)
    h = (h + degree_shift) % 360
    if h < 0:
        h += 360
    return hsl_to_hex(h, s, l)


def luminance(r, g, b):
    """Computes the relative luminance of an sRGB color.

    Channels are linearized with the sRGB transfer function and weighted with
    the ITU-R BT.709 coefficients, as in the WCAG 2.0 definition.

    Args:
        r (int): Red channel in [0, 255].
        g (int): Green channel in [0, 255].
        b (int): Blue channel in [0, 255].

    Returns:
        float: The relative luminance in [0, 1].
    """

    def linearize(c):
        c = c / 255
        return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4

    return 0.2126 * linearize(r) + 0.7152 * linearize(g) + 0.0722 * linearize(b)


def hex_luminance(hex_color):
    return luminance(*hex_to_rgb(hex_color))


def contrast_ratio(l1, l2):
    """Computes the WCAG contrast ratio of two relative luminances.

    The ratio is symmetric in its arguments and always at least 1.
    """
    lighter, darker = max(l1, l2), min(l1, l2)
    return (lighter + 0.05) / (darker + 0.05)


def color_distance(color_a, color_b):
    """Returns the Euclidean distance between two hex colors in RGB space."""
    return math.dist(hex_to_rgb(color_a), hex_to_rgb(color_b))


def random_hex_color():
    """Generates a uniformly random hex color."""
    return f"#{np.random.randint(0, 0x1000000):06x}"


def load_thumbnail(bitmap, size=100):
    """Loads a bitmap as an RGB image no larger than `size` x `size`.

    Files are reduced while they are decoded (JPEG draft mode) and resized in
    place, so no full-resolution copy of a background is made. Images and
    arrays passed in are left untouched.
    """
    if isinstance(bitmap, (str, Path)):
        with Image.open(bitmap) as img:
            img.draft("RGB", (size, size))
            img.thumbnail((size, size))
            return img.convert("RGB")
    if isinstance(bitmap, Image.Image):
        img = bitmap.convert("RGB")
    elif isinstance(bitmap, np.ndarray):
        img = Image.fromarray(bitmap.astype(np.uint8)).convert("RGB")
    else:
        raise ValueError(f"bitmap must be a path, PIL.Image or numpy array, instead got: {type(bitmap)}")
    img.thumbnail((size, size))
    return img


def dominant_swatches(bitmap, count=3, thumbnail_size=100, palette_size=16):
    """Extracts the dominant colors of a bitmap ranked by pixel population.

    The bitmap is first reduced to a small thumbnail to bound the cost of the
    analysis, then quantized with Pillow's median-cut algorithm. The palette
    entries are ranked by the number of thumbnail pixels mapped to each one.

    Args:
        bitmap (str | Path | Image.Image | np.ndarray): The image to analyze.
        count (int, optional): The maximum number of swatches to return.
            Defaults to 3.
        thumbnail_size (int, optional): The maximum side of the thumbnail.
            Defaults to 100.
        palette_size (int, optional): The number of colors the quantizer may
            use. Defaults to 16.

    Returns:
        list[str]: Up to `count` hex colors, most dominant first.
    """
    img = load_thumbnail(bitmap, thumbnail_size)

    quantized = img.quantize(colors=max(palette_size, count), method=Image.Quantize.MEDIANCUT)
    palette = quantized.getpalette()
    counts = quantized.getcolors(maxcolors=256) or []
    counts = sorted(counts, key=lambda item: item[0], reverse=True)

    swatches = []
    for _, index in counts:
        swatch = rgb_to_hex(*palette[index * 3 : index * 3 + 3])
        if swatch not in swatches:
            swatches.append(swatch)
        if len(swatches) == count:
            break
    return swatches
