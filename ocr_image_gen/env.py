"""This file defines the default paths used by the generator.

This module centralizes the directory layout the generator expects, making it
easier to manage the project structure. All paths are constructed relative to
the project's root directory and can be overridden through the configuration.
"""

from pathlib import Path


ROOT_DIR = Path(__file__).parent.parent
"""The root directory of the project."""

ASSETS_PATH = ROOT_DIR / "assets"
"""The path to the directory containing fonts, sentences and background images."""

FONTS_ROOT = ASSETS_PATH / "fonts"
"""The directory holding one sub-directory per font family."""

SENTENCES_FILE = ASSETS_PATH / "sentences.txt"
"""The text file with one source sentence per line."""

BACKGROUND_DIR = ASSETS_PATH / "images"
"""The directory with photographic background images."""

OUTPUT_DIR = ROOT_DIR / "output"
"""The directory where generated images and labels are written."""
