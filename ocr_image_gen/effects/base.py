"""Core types shared by all style effects.

An effect is a probabilistically gated unit that contributes zero or more
style declarations to an image. The set of effects is closed: every kind is
listed in `EffectKind` and its synthesis function is registered in a lookup
table with the `register` decorator. Effects communicate only through the
immutable `EffectContext` that the pipeline threads from one stage to the next.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Optional, Tuple, Union

import numpy as np


@dataclass(frozen=True)
class StyleDeclaration:
    """A single `(property, value)` CSS declaration."""

    property: str
    value: str

    def css(self) -> str:
        return f"{self.property}: {self.value};"


class BackgroundType(str, Enum):
    NONE = "none"
    COLOR = "color"
    IMAGE = "image"


class BackgroundRender(str, Enum):
    SOLID = "solid"
    LINEAR = "linear"
    RADIAL = "radial"


@dataclass(frozen=True)
class NoBackground:
    kind = BackgroundType.NONE


@dataclass(frozen=True)
class ColorBackground:
    """A background painted with a solid color or a two-color gradient."""

    hex: str
    secondary_hex: Optional[str] = None
    render_kind: BackgroundRender = BackgroundRender.SOLID
    kind = BackgroundType.COLOR


@dataclass(frozen=True)
class ImageBackground:
    """A background covered by an image from the background pool."""

    name: str
    url: str
    kind = BackgroundType.IMAGE


BackgroundDecision = Union[NoBackground, ColorBackground, ImageBackground]


@dataclass(frozen=True)
class EffectContext:
    """Per-image state visible to every effect.

    A fresh context is created for each image. Stages never mutate it; they
    derive a new context carrying the decisions made so far (the chosen
    background, then the chosen text color).

    Attributes:
        image_width (int): The width of the image in pixels.
        image_height (int): The height of the image in pixels.
        font_family (str): The name of the font family used for the text.
        image_files (tuple[str, ...]): Available background image filenames.
        image_dir (Path | None): The directory holding `image_files`.
        background (BackgroundDecision): The background chosen for the image.
        text_color (str | None): The text color chosen for the image.
    """

    image_width: int
    image_height: int
    font_family: str
    image_files: Tuple[str, ...] = ()
    image_dir: Optional[Path] = None
    background: BackgroundDecision = field(default_factory=NoBackground)
    text_color: Optional[str] = None

    @property
    def background_type(self) -> BackgroundType:
        return self.background.kind


@dataclass(frozen=True)
class EffectOutput:
    """What an effect contributes: declarations and optional new decisions."""

    declarations: Tuple[StyleDeclaration, ...] = ()
    background: Optional[BackgroundDecision] = None
    text_color: Optional[str] = None


class EffectKind(str, Enum):
    BACKGROUND_COLOR = "BackgroundColor"
    BACKGROUND_IMAGE = "BackgroundImage"
    TEXT_COLOR = "TextColor"
    FONT_STYLE = "FontStyle"
    FONT_WEIGHT = "FontWeight"
    STROKE = "Stroke"
    TEXT_SHADOW = "TextShadow"
    ROTATION = "Rotation"
    TRANSFORM = "Transform"


Synthesizer = Callable[[EffectContext, "Effect"], Optional[EffectOutput]]

_SYNTHESIZERS: Dict[EffectKind, Synthesizer] = {}


def register(kind: EffectKind):
    """Registers the synthesis function of an effect kind."""

    def decorator(fn: Synthesizer) -> Synthesizer:
        _SYNTHESIZERS[kind] = fn
        return fn

    return decorator


def get_synthesizer(kind: EffectKind) -> Synthesizer:
    return _SYNTHESIZERS[kind]


@dataclass(frozen=True)
class Effect:
    """A probability gate bound to the synthesis function of one effect kind.

    Effects hold no per-image state and can be reused across images and
    threads; `should_apply` rolls the dice afresh on every call.

    Attributes:
        kind (EffectKind): Which effect this is.
        probability (float): The occurrence probability in [0, 1].
        options (dict): Extra keyword options read by the synthesis function,
            e.g. `require_images` for the background image effect.
    """

    kind: EffectKind
    probability: float = 0.5
    options: Dict[str, object] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        if not 0.0 <= self.probability <= 1.0:
            raise ValueError(f"probability of {self.kind.value} must be in [0, 1], got {self.probability}")
        # unknown kinds raise KeyError here, not at render time
        get_synthesizer(self.kind)

    @property
    def name(self) -> str:
        return self.kind.value

    def should_apply(self) -> bool:
        return np.random.rand() < self.probability

    def synthesize(self, context: EffectContext) -> Optional[EffectOutput]:
        return get_synthesizer(self.kind)(context, self)


def declarations(*pairs) -> Tuple[StyleDeclaration, ...]:
    """Builds a tuple of declarations from `(property, value)` pairs."""
    return tuple(StyleDeclaration(prop, value) for prop, value in pairs)
