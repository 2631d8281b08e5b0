"""Loading of fonts, sentences and background images.

This module provides the providers the generator draws its inputs from: font
families (one sub-directory per family under the fonts directory), the
sentence pool (one sentence per line) and the pool of background images.
"""

import base64
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

import numpy as np
from loguru import logger

FONT_SUFFIXES = {".otf", ".ttf", ".woff", ".woff2"}
IMAGE_SUFFIXES = {".jpg", ".jpeg", ".png", ".webp"}
DEFAULT_SENTENCES = (
    "The quick brown fox jumps over the lazy dog.",
    "Hello World.",
    "This is a test sentence.",
)


@dataclass(frozen=True)
class FontFile:
    """A font file ready to be embedded into a document.

    Attributes:
        name (str): The font family name used in CSS.
        extension (str): The file format, e.g. "ttf" or "woff2".
        base64_content (str): The base64-encoded font binary.
    """

    name: str
    extension: str
    base64_content: str

    @property
    def data_uri(self) -> str:
        return f"data:font/{self.extension};base64,{self.base64_content}"


@dataclass
class FontFamily:
    name: str
    files: List[Path] = field(default_factory=list)


def get_font_families(fonts_dir):
    """Lists the font families found in a directory.

    Every sub-directory is a family; the font files inside it are its members.
    A missing directory is created (with a warning) and yields no families.
    Families without any font file are skipped.

    Args:
        fonts_dir (str or Path): The directory to scan.

    Returns:
        list[FontFamily]: The families, sorted by name.
    """
    fonts_dir = Path(fonts_dir)
    if not fonts_dir.exists():
        logger.warning(f"Fonts directory {fonts_dir} does not exist. Creating it. Please add font folders and files.")
        fonts_dir.mkdir(parents=True, exist_ok=True)
        return []

    families = []
    for folder in sorted(p for p in fonts_dir.iterdir() if p.is_dir()):
        files = sorted(p for p in folder.iterdir() if p.is_file() and p.suffix.lower() in FONT_SUFFIXES)
        if not files:
            logger.warning(f"Font family folder {folder.name} contains no font files, skipping it")
            continue
        families.append(FontFamily(name=folder.name, files=files))
    return families


def load_font_file(family, path=None):
    """Reads one member of a font family and encodes it for embedding.

    Args:
        family (FontFamily): The family to read from.
        path (Path, optional): The font file to read. A random member of the
            family is used when omitted.

    Returns:
        FontFile: The encoded font.
    """
    if path is None:
        path = family.files[np.random.randint(len(family.files))]
    path = Path(path)
    content = base64.b64encode(path.read_bytes()).decode("ascii")
    return FontFile(name=family.name, extension=path.suffix.lstrip(".").lower(), base64_content=content)


def load_sentences(file_path):
    """Loads the sentence pool from a text file.

    Blank lines are ignored. When the file does not exist, it is created with a
    few default sentences so that a first run produces output.

    Args:
        file_path (str or Path): The sentences file.

    Returns:
        list[str]: The sentences, in file order.
    """
    file_path = Path(file_path)
    if not file_path.exists():
        logger.warning(f"Sentences file {file_path} not found. Writing default sentences.")
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text("\n".join(DEFAULT_SENTENCES), encoding="utf-8")
    content = file_path.read_text(encoding="utf-8")
    return [line.strip() for line in content.splitlines() if line.strip()]


def list_background_images(image_dir):
    """Lists the background image filenames available in a directory.

    Returns:
        list[str]: Sorted filenames; empty when the directory does not exist.
    """
    if image_dir is None:
        return []
    image_dir = Path(image_dir)
    if not image_dir.is_dir():
        return []
    return sorted(p.name for p in image_dir.iterdir() if p.is_file() and p.suffix.lower() in IMAGE_SUFFIXES)
