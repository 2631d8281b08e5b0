"""Pydantic schemas for type-safe generator configuration.

This module defines the structure of the generator configuration using
Pydantic models. Values are validated on load, so an inverted range or a
probability outside [0, 1] is reported before any image is generated. Each
nested model corresponds to a section of `config.yaml`.
"""

from pathlib import Path
from typing import Type

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from ocr_image_gen.env import BACKGROUND_DIR, FONTS_ROOT, OUTPUT_DIR, SENTENCES_FILE


class IntRange(BaseModel):
    """An inclusive integer range."""

    min: int = Field(..., description="The smallest value that may be drawn.")
    max: int = Field(..., description="The largest value that may be drawn.")

    @model_validator(mode="after")
    def check_order(self):
        if self.min > self.max:
            raise ValueError(f"range minimum {self.min} is greater than its maximum {self.max}")
        return self


class ImageConfig(BaseModel):
    """Ranges for the randomized output image parameters."""

    width: IntRange = Field(default_factory=lambda: IntRange(min=400, max=1200), description="Image width in pixels.")
    height: IntRange = Field(default_factory=lambda: IntRange(min=300, max=800), description="Image height in pixels.")
    quality: IntRange = Field(default_factory=lambda: IntRange(min=50, max=100), description="JPEG quality.")

    @model_validator(mode="after")
    def check_quality(self):
        if self.quality.min < 0 or self.quality.max > 100:
            raise ValueError("JPEG quality must lie within [0, 100]")
        return self


class TextConfig(BaseModel):
    """Font size, text variants and document direction."""

    font_size: IntRange = Field(default_factory=lambda: IntRange(min=24, max=96), description="Font size in pixels.")
    numeral_probability: float = Field(0.1, ge=0, le=1, description="Chance of replacing the sentence with numerals.")
    numeral_digits: str = Field("۰۱۲۳۴۵۶۷۸۹", min_length=1, description="Digits used for the numeral variant.")
    numeral_length: IntRange = Field(default_factory=lambda: IntRange(min=4, max=14), description="Length of the numeral string.")
    noise_probability: float = Field(0.1, ge=0, le=1, description="Chance of injecting punctuation or diacritics.")
    noise_characters: str = Field("،؛؟!.:«»()-ًٌٍَُِّْ", min_length=1, description="Characters that may be injected.")
    direction: str = Field("rtl", description="The `dir` attribute of the rendered document.")
    lang: str = Field("fa-IR", description="The `lang` attribute of the rendered document.")


class EffectProbabilities(BaseModel):
    """Occurrence probability of every style effect."""

    background_color: float = Field(1.0, ge=0, le=1)
    background_image: float = Field(0.6, ge=0, le=1)
    text_color: float = Field(1.0, ge=0, le=1)
    font_style: float = Field(0.15, ge=0, le=1)
    font_weight: float = Field(0.5, ge=0, le=1)
    stroke: float = Field(0.2, ge=0, le=1)
    text_shadow: float = Field(0.3, ge=0, le=1)
    rotation: float = Field(0.3, ge=0, le=1)
    transform: float = Field(0.3, ge=0, le=1)
    common_color: float = Field(0.15, ge=0, le=1, description="Chance of a common text color on color backgrounds.")


class GeneratorConfig(BaseSettings):
    """The root configuration object of the generator.

    This class inherits from `pydantic_settings.BaseSettings`, so every value
    can also be provided through environment variables prefixed with
    `OCR_IMAGE_GEN_` (nested fields use `__`, e.g.
    `OCR_IMAGE_GEN_EFFECTS__STROKE=0.5`) or a `.env` file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_prefix="OCR_IMAGE_GEN_",
        env_nested_delimiter="__",
    )

    images_per_font: int = Field(100, ge=1, description="The number of images generated for every font family.")
    concurrent_tabs: int = Field(4, ge=1, description="The number of renderers working in parallel.")
    require_background_images: bool = Field(False, description="Fail when image backgrounds are enabled but none exist.")
    fonts_dir: Path = Field(FONTS_ROOT, description="Directory with one sub-directory per font family.")
    sentences_file: Path = Field(SENTENCES_FILE, description="Text file with one sentence per line.")
    image_dir: Path = Field(BACKGROUND_DIR, description="Directory with background images.")
    output_dir: Path = Field(OUTPUT_DIR, description="Directory where images and labels are written.")
    render_timeout: float = Field(30, gt=0, description="Seconds to wait for one screenshot.")
    image: ImageConfig = Field(default_factory=ImageConfig)
    text: TextConfig = Field(default_factory=TextConfig)
    effects: EffectProbabilities = Field(default_factory=EffectProbabilities)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Define the priority of configuration sources.

        Earlier sources override later ones, and nested sections are merged
        key by key before validation, so an environment variable may set a
        single bound of a range whose other bound comes from the YAML file:

        1.  `init_settings`: Values passed directly to the constructor.
        2.  `env_settings`: Environment variables prefixed with `OCR_IMAGE_GEN_`.
        3.  `dotenv_settings`: Variables loaded from a `.env` file.
        4.  `YamlConfigSettingsSource`: The file given as the `yaml_file` keyword.
        5.  `file_secret_settings`: Settings from Docker-style secrets files.
        """
        yaml_file = init_settings.init_kwargs.get("yaml_file")
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=yaml_file, yaml_file_encoding="utf-8"),
            file_secret_settings,
        )
