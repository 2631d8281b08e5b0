"""Background effects: solid/gradient color fills and photographic images.

Both effects run in the background stage. The color effect is meant to fire
on almost every image; when the image effect also fires, its decision replaces
the color decision so that exactly one background type reaches the text stage.
"""

from pathlib import Path

import numpy as np

from ocr_image_gen.colors import analogous_color, random_hex_color
from ocr_image_gen.effects.base import (
    BackgroundRender,
    ColorBackground,
    EffectKind,
    EffectOutput,
    ImageBackground,
    declarations,
    register,
)
from ocr_image_gen.exceptions import ConfigurationError


def pick_secondary_color(base_color):
    """Picks the second gradient color: analogous half of the time, else random."""
    if np.random.rand() < 0.5:
        shift = np.random.randint(30, 61) * np.random.choice([-1, 1])
        return analogous_color(base_color, shift)
    return random_hex_color()


def pick_render_kind():
    """Chooses between a solid fill, a linear and a radial gradient.

    A type is drawn uniformly from {1, 2, 3}; type 1, and 40% of the other
    draws, render as a solid fill so that solid backgrounds dominate.
    """
    render_type = np.random.randint(1, 4)
    if render_type == 1 or np.random.rand() < 0.4:
        return BackgroundRender.SOLID
    if render_type == 2:
        return BackgroundRender.LINEAR
    return BackgroundRender.RADIAL


def background_fill(decision):
    """Renders a color background decision as a CSS `background` value."""
    if decision.render_kind == BackgroundRender.LINEAR:
        angle = np.random.randint(0, 361)
        return f"linear-gradient({angle}deg, {decision.hex}, {decision.secondary_hex})"
    if decision.render_kind == BackgroundRender.RADIAL:
        return f"radial-gradient(circle, {decision.hex}, {decision.secondary_hex})"
    return decision.hex


@register(EffectKind.BACKGROUND_COLOR)
def background_color(context, effect):
    base = random_hex_color()
    render_kind = pick_render_kind()
    secondary = None if render_kind == BackgroundRender.SOLID else pick_secondary_color(base)
    decision = ColorBackground(hex=base, secondary_hex=secondary, render_kind=render_kind)
    return EffectOutput(
        declarations=declarations(("background", background_fill(decision))),
        background=decision,
    )


def image_url(name, image_dir=None):
    """Builds the URL the renderer uses to load a background image."""
    if image_dir is None:
        return name
    return (Path(image_dir) / name).absolute().as_uri()


@register(EffectKind.BACKGROUND_IMAGE)
def background_image(context, effect):
    """Covers the background with a random image from the background pool.

    When no images are available the effect either raises a
    `ConfigurationError` (when the effect was created with
    `require_images=True`) or declines to contribute.
    """
    if not context.image_files:
        if effect.options.get("require_images", False):
            raise ConfigurationError(
                f"Image backgrounds are enabled but no background image was found in {context.image_dir}"
            )
        return None

    name = context.image_files[np.random.randint(len(context.image_files))]
    url = image_url(name, context.image_dir)
    return EffectOutput(
        declarations=declarations(
            ("background-image", f"url('{url}')"),
            ("background-size", "cover"),
        ),
        background=ImageBackground(name=name, url=url),
    )
