"""The style-synthesis pipeline.

The pipeline turns a fresh `EffectContext` into the list of style
declarations for one image. Effects are organized in three groups that must
run in a fixed order, because later groups read the decisions of earlier ones:

1.  the background stage chooses the background (color fill or image),
2.  the text stage chooses the text color from that background,
3.  the post-text stage derives outlines and geometry from the text color.

Each stage is a method that takes the record produced by the previous stage,
so the ordering is part of the call signatures rather than a convention.
"""

from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple

from loguru import logger

from ocr_image_gen.effects import Effect, EffectContext, EffectKind, EffectOutput, StyleDeclaration
from ocr_image_gen.exceptions import ConfigurationError

CONTAINER_PREFIX = "background"


@dataclass(frozen=True)
class BackgroundStage:
    context: EffectContext
    declarations: Tuple[StyleDeclaration, ...]


@dataclass(frozen=True)
class TextStage:
    context: EffectContext
    declarations: Tuple[StyleDeclaration, ...]


@dataclass(frozen=True)
class PostTextStage:
    """The final record of a pipeline run.

    Attributes:
        context (EffectContext): The context with every decision made for the image.
        declarations (tuple[StyleDeclaration, ...]): All declarations in emission order.
    """

    context: EffectContext
    declarations: Tuple[StyleDeclaration, ...]

    @property
    def container(self) -> List[StyleDeclaration]:
        return partition_declarations(self.declarations)[0]

    @property
    def text(self) -> List[StyleDeclaration]:
        return partition_declarations(self.declarations)[1]


def partition_declarations(declarations):
    """Splits declarations into container and text buckets.

    Declarations whose property starts with "background" style the outer
    container; all others style the text node. Relative order is preserved in
    both buckets so later declarations still override earlier ones.

    Returns:
        tuple[list[StyleDeclaration], list[StyleDeclaration]]: The container
        and text declarations.
    """
    container, text = [], []
    for declaration in declarations:
        if declaration.property.startswith(CONTAINER_PREFIX):
            container.append(declaration)
        else:
            text.append(declaration)
    return container, text


def _merge(context, output):
    if output.background is not None:
        context = replace(context, background=output.background)
    if output.text_color is not None:
        context = replace(context, text_color=output.text_color)
    return context


class StylePipeline:
    """Runs the background, text and post-text effect groups for one image.

    The pipeline holds only its configured effects and can be shared across
    threads; all per-image state lives in the context passed to `synthesize`.

    Attributes:
        background_effects (tuple[Effect, ...]): Effects of the background stage.
        text_effects (tuple[Effect, ...]): Effects of the text stage.
        post_text_effects (tuple[Effect, ...]): Effects of the post-text stage.
        require_background_images (bool): Whether a missing background image
            pool is a configuration error.
    """

    def __init__(
        self,
        background_effects: Sequence[Effect],
        text_effects: Sequence[Effect],
        post_text_effects: Sequence[Effect],
        require_background_images: bool = False,
    ):
        self.background_effects = tuple(background_effects)
        self.text_effects = tuple(text_effects)
        self.post_text_effects = tuple(post_text_effects)
        self.require_background_images = require_background_images

    @classmethod
    def from_config(cls, config):
        """Builds the default effect groups from a `GeneratorConfig`."""
        p = config.effects
        require = config.require_background_images
        return cls(
            background_effects=[
                Effect(EffectKind.BACKGROUND_COLOR, p.background_color),
                Effect(EffectKind.BACKGROUND_IMAGE, p.background_image, {"require_images": require}),
            ],
            text_effects=[
                Effect(EffectKind.TEXT_COLOR, p.text_color, {"common_color_probability": p.common_color}),
                Effect(EffectKind.FONT_STYLE, p.font_style),
                Effect(EffectKind.FONT_WEIGHT, p.font_weight),
            ],
            post_text_effects=[
                Effect(EffectKind.STROKE, p.stroke),
                Effect(EffectKind.TEXT_SHADOW, p.text_shadow),
                Effect(EffectKind.ROTATION, p.rotation),
                Effect(EffectKind.TRANSFORM, p.transform),
            ],
            require_background_images=require,
        )

    def check_resources(self, image_files):
        """Fails fast when image backgrounds are required but none are available.

        Raises:
            ConfigurationError: If a background image effect can fire, images
                are required and `image_files` is empty.
        """
        uses_images = any(
            e.kind == EffectKind.BACKGROUND_IMAGE and e.probability > 0 for e in self.background_effects
        )
        if self.require_background_images and uses_images and not image_files:
            raise ConfigurationError(
                "Image backgrounds are required but no background images were supplied. "
                "Add images to the background directory or disable `require_background_images`."
            )

    def _apply(self, effect, context) -> Optional[EffectOutput]:
        """Rolls the effect's probability and runs it, isolating failures.

        A failing effect is logged and contributes nothing, except for
        configuration errors, which always propagate.
        """
        if not effect.should_apply():
            return None
        try:
            return effect.synthesize(context)
        except ConfigurationError:
            raise
        except Exception as e:
            logger.warning(f"Effect {effect.name} failed and was skipped: {e}")
            return None

    def _run_group(self, effects, context):
        emitted = []
        for effect in effects:
            output = self._apply(effect, context)
            if output is None:
                continue
            emitted.extend(output.declarations)
            context = _merge(context, output)
        return context, tuple(emitted)

    def run_background_stage(self, context: EffectContext) -> BackgroundStage:
        context, declarations = self._run_group(self.background_effects, context)
        return BackgroundStage(context=context, declarations=declarations)

    def run_text_stage(self, stage: BackgroundStage) -> TextStage:
        if not isinstance(stage, BackgroundStage):
            raise TypeError(f"the text stage must follow the background stage, got {type(stage).__name__}")
        context, declarations = self._run_group(self.text_effects, stage.context)
        return TextStage(context=context, declarations=stage.declarations + declarations)

    def run_post_text_stage(self, stage: TextStage) -> PostTextStage:
        if not isinstance(stage, TextStage):
            raise TypeError(f"the post-text stage must follow the text stage, got {type(stage).__name__}")
        context, declarations = self._run_group(self.post_text_effects, stage.context)
        return PostTextStage(context=context, declarations=stage.declarations + declarations)

    def synthesize(self, context: EffectContext) -> PostTextStage:
        """Runs all three stages for one image.

        Args:
            context (EffectContext): A fresh context for the image.

        Returns:
            PostTextStage: The final context and every emitted declaration.
        """
        background = self.run_background_stage(context)
        text = self.run_text_stage(background)
        return self.run_post_text_stage(text)
