"""Style effects for the synthesis pipeline.

Importing this package registers the synthesis function of every effect kind,
so any `Effect` built afterwards can be dispatched.
"""

from ocr_image_gen.effects.base import (
    BackgroundDecision,
    BackgroundRender,
    BackgroundType,
    ColorBackground,
    Effect,
    EffectContext,
    EffectKind,
    EffectOutput,
    ImageBackground,
    NoBackground,
    StyleDeclaration,
)
from ocr_image_gen.effects import background, post_text, text  # noqa: F401
