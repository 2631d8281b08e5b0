"""Handles loading and validation of the generator configuration.

This module provides the `load_config` function, which reads a `config.yaml`
file, layers environment variables on top of it and validates the result with
the Pydantic schemas defined in `schemas.py`.
"""

from pathlib import Path

from ocr_image_gen.config.schemas import (
    EffectProbabilities,
    GeneratorConfig,
    ImageConfig,
    IntRange,
    TextConfig,
)

CONFIG_PATH = Path(__file__).parent / "config.yaml"


def load_config(config_path=None, **overrides) -> GeneratorConfig:
    """Loads a YAML configuration file and merges it with environment variables.

    The layering is as follows, with later sources overriding earlier ones:

    1.  Default values defined in the Pydantic schemas.
    2.  Values from the YAML configuration file.
    3.  Values from environment variables (prefixed with `OCR_IMAGE_GEN_`) or a `.env` file.
    4.  Explicit keyword overrides, e.g. from the command line. `None` values are ignored.

    All sources are merged before a single validation, so nested values such as
    `OCR_IMAGE_GEN_IMAGE__WIDTH__MIN` only replace the key they name.

    Args:
        config_path (str | Path, optional): The YAML file to read. Defaults to
            the `config.yaml` shipped next to this module. A missing file is
            treated as empty.
        **overrides: Top-level configuration values that take precedence.

    Returns:
        A validated `GeneratorConfig`.
    """
    config_path = Path(config_path) if config_path else CONFIG_PATH
    overrides = {k: v for k, v in overrides.items() if v is not None}
    return GeneratorConfig(yaml_file=config_path, **overrides)


__all__ = [
    "CONFIG_PATH",
    "EffectProbabilities",
    "GeneratorConfig",
    "ImageConfig",
    "IntRange",
    "TextConfig",
    "load_config",
]
