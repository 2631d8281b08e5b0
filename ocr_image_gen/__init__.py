"""The ocr_image_gen package synthesizes labeled text images for OCR training.

Each image renders one sentence in a given font over a randomized color or
photographic background, styled by a pipeline of probabilistic effects that
keeps the text readable.

Example:
    >>> from ocr_image_gen import ImageSpecBuilder, StylePipeline, load_config
    >>> config = load_config()
    >>> builder = ImageSpecBuilder(StylePipeline.from_config(config), config)
    >>> request = builder.build_image_spec("Hello World.", font)
"""

from ._version import __version__ as __version__
from ocr_image_gen.config import load_config as load_config
from ocr_image_gen.image_spec import ImageSpecBuilder as ImageSpecBuilder
from ocr_image_gen.image_spec import RenderRequest as RenderRequest
from ocr_image_gen.pipeline import StylePipeline as StylePipeline
from ocr_image_gen.readability import select_text_color as select_text_color
