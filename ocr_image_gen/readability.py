"""Selection of a readable text color for a given background.

The selector builds a pool of candidate colors (fixed neutrals plus
complementary-hue variants of the dominant background swatches), rejects the
candidates that are not legible against the background and ranks the rest by a
weighted score. The routine is deterministic: the same swatches always yield
the same color.
"""

from loguru import logger

from ocr_image_gen.colors import (
    color_distance,
    contrast_ratio,
    hex_luminance,
    hex_to_hsl,
    hsl_to_hex,
    normalize_hex,
)

NEUTRAL_CANDIDATES = ("#000000", "#ffffff", "#333333", "#f0f0f0")
BLACK = "#000000"
WHITE = "#ffffff"

SWATCH_DECAY = 0.7
MIN_CONTRAST = 4.5
MIN_DISTANCE = 50
DARK_LIGHTNESS_LEVELS = (0.15, 0.25, 0.35)
LIGHT_LIGHTNESS_LEVELS = (0.75, 0.85, 0.95)


def weighted_luminance(swatches):
    """Averages swatch luminances, giving swatch `i` a weight of `0.7 ** i`."""
    weights = [SWATCH_DECAY**i for i in range(len(swatches))]
    total = sum(w * hex_luminance(s) for w, s in zip(weights, swatches))
    return total / sum(weights)


def candidate_colors(swatches, background_luminance):
    """Builds the ordered pool of candidate text colors.

    For each of the two most dominant swatches the hue is rotated by 180
    degrees and the color is produced at three lightness levels, both with the
    swatch's own saturation (capped at 0.6) and with a desaturated version.
    Dark levels are used on light backgrounds and light levels on dark ones.
    """
    if background_luminance > 0.5:
        levels = DARK_LIGHTNESS_LEVELS
    else:
        levels = LIGHT_LIGHTNESS_LEVELS

    candidates = list(NEUTRAL_CANDIDATES)
    for swatch in swatches[:2]:
        h, s, _ = hex_to_hsl(swatch)
        rotated_hue = (h + 180) % 360
        for lightness in levels:
            for saturation in (min(s, 0.6), s * 0.3):
                candidate = hsl_to_hex(rotated_hue, saturation, lightness)
                if candidate not in candidates:
                    candidates.append(candidate)
    return candidates


def score_candidate(candidate, swatches, background_luminance):
    """Scores a candidate text color, returning None when it is not legible.

    A candidate is rejected when its contrast ratio against the background is
    below the WCAG AA threshold of 4.5 or when it lies closer than 50 RGB units
    to any background swatch.

    Args:
        candidate (str): The candidate hex color.
        swatches (list[str]): The background swatches, most dominant first.
        background_luminance (float): The weighted background luminance.

    Returns:
        float | None: The score, higher is better.
    """
    ratio = contrast_ratio(hex_luminance(candidate), background_luminance)
    if ratio < MIN_CONTRAST:
        return None
    distance = min(color_distance(candidate, swatch) for swatch in swatches)
    if distance < MIN_DISTANCE:
        return None

    _, saturation, lightness = hex_to_hsl(candidate)
    if background_luminance > 0.5:
        lightness_fit = 1 - lightness
    else:
        lightness_fit = lightness

    score = 30 * min(ratio, 7) / 7
    score += 25 * min(distance, 150) / 150
    score += 20 * (1 - saturation)
    score += 15 * lightness_fit
    if candidate in (BLACK, WHITE):
        score += 10
    return score


def select_text_color(swatches):
    """Selects a readable text color for a background.

    Args:
        swatches (list[str]): Non-empty list of background hex colors, ordered
            from most to least dominant.

    Returns:
        str: The best-scoring legible candidate, or pure black (light
        backgrounds) / pure white (dark backgrounds) when none is legible.

    Raises:
        ValueError: If `swatches` is empty.
    """
    if not swatches:
        raise ValueError("select_text_color requires at least one background swatch")
    swatches = [normalize_hex(s) for s in swatches]
    background_luminance = weighted_luminance(swatches)

    best_color, best_score = None, None
    for candidate in candidate_colors(swatches, background_luminance):
        score = score_candidate(candidate, swatches, background_luminance)
        if score is not None and (best_score is None or score > best_score):
            best_color, best_score = candidate, score

    if best_color is None:
        best_color = BLACK if background_luminance > 0.5 else WHITE
        logger.debug(f"No legible candidate for {swatches}, falling back to {best_color}")
    return best_color
