"""Batch generation of the synthetic text-image corpus.

This module wires the providers, the style pipeline, the image spec builder
and a pool of renderers together. Every font family gets `images_per_font`
images written to `<output_dir>/<family>/image_<n>.jpeg`, and a `labels.csv`
file maps every written image to the text rendered in it.
"""

import json
import os
import queue
import time
from functools import partial
from pathlib import Path

import fire
import numpy as np
import pandas as pd
from loguru import logger
from tqdm.contrib.concurrent import thread_map

from ocr_image_gen.assets import get_font_families, list_background_images, load_font_file, load_sentences
from ocr_image_gen.config import load_config
from ocr_image_gen.exceptions import ConfigurationError, SkipSample
from ocr_image_gen.image_spec import ImageSpecBuilder
from ocr_image_gen.pipeline import StylePipeline
from ocr_image_gen.renderer import Renderer

LABEL_COLUMNS = ["font", "file", "text"]


def write_debug_files(request, image_path):
    """Saves the HTML document and the synthesized styles next to an image."""
    image_path.with_suffix(".html").write_text(request.html, encoding="utf-8")
    debug_info = {
        "width": request.width,
        "height": request.height,
        "quality": request.quality,
        "font_size": request.font_size,
        "font": request.font.name,
        "sentence": request.sentence,
        "text": request.text,
        "container_styles": [d.css() for d in request.container_styles],
        "text_styles": [d.css() for d in request.text_styles],
    }
    image_path.with_suffix(".json").write_text(
        json.dumps(debug_info, indent=4, ensure_ascii=False), encoding="utf-8"
    )


def worker_fn(job, builder, renderers, output_dir, debug=False):
    """Generates, renders and saves a single image.

    This function is executed by a thread pool. It borrows a renderer from the
    shared pool for the duration of the render, so no two threads ever drive
    the same browser. Failures of a single image are logged and reported as
    `None`; only configuration errors abort the batch.

    Args:
        job (tuple): `(index, font, sentence)` of the image to produce.
        builder (ImageSpecBuilder): Builds the render request.
        renderers (queue.Queue): The pool of idle renderers.
        output_dir (Path): The root output directory.
        debug (bool, optional): If True, also saves the HTML document and the
            synthesized styles. Defaults to False.

    Returns:
        tuple or None: `(font, relative image path, text)` on success.
    """
    index, font, sentence = job
    try:
        request = builder.build_image_spec(sentence, font, index)

        renderer = renderers.get()
        try:
            image_bytes = renderer.render(request)
        finally:
            renderers.put(renderer)

        font_dir = Path(output_dir) / font.name
        font_dir.mkdir(parents=True, exist_ok=True)
        image_path = font_dir / f"image_{index + 1}.jpeg"
        image_path.write_bytes(image_bytes)
        logger.debug(f"Saved {image_path}")
        if debug:
            write_debug_files(request, image_path)

        return font.name, str(image_path.relative_to(output_dir)), request.text

    except ConfigurationError:
        raise
    except SkipSample as e:
        logger.warning(f"Skipping image {index} of {font.name}: {e}")
        return None
    except Exception:
        logger.exception(f"Error generating image {index} of {font.name}, sentence {sentence[:12]!r}")
        return None


def run(
    images_per_font=None,
    concurrent_tabs=None,
    fonts_dir=None,
    sentences_file=None,
    image_dir=None,
    output_dir=None,
    require_background_images=None,
    font_limit=None,
    debug=False,
    config_path=None,
):
    """Generates the corpus for every font family.

    Arguments left as None fall back to the configuration file and the
    `OCR_IMAGE_GEN_` environment variables.

    Args:
        images_per_font (int, optional): Images generated per font family.
        concurrent_tabs (int, optional): Renderers working in parallel.
        fonts_dir (str, optional): Directory with one folder per font family.
        sentences_file (str, optional): Text file with one sentence per line.
        image_dir (str, optional): Directory with background images.
        output_dir (str, optional): Directory where images and labels are written.
        require_background_images (bool, optional): Fail when image
            backgrounds are enabled but no background image exists.
        font_limit (int, optional): Only process the first `font_limit` families.
        debug (bool, optional): Save the HTML and styles of every image.
        config_path (str, optional): The YAML configuration file to use.

    Raises:
        ConfigurationError: If no font family or no sentence is available, or
            background images are required but missing.
    """
    config = load_config(
        config_path,
        images_per_font=images_per_font,
        concurrent_tabs=concurrent_tabs,
        fonts_dir=fonts_dir,
        sentences_file=sentences_file,
        image_dir=image_dir,
        output_dir=output_dir,
        require_background_images=require_background_images,
    )

    families = get_font_families(config.fonts_dir)
    if not families:
        raise ConfigurationError(
            f"No font families found in {config.fonts_dir}. Add one folder per family with .ttf, .otf, .woff or .woff2 files."
        )
    if font_limit is not None:
        families = families[: int(font_limit)]
    logger.info(f"Found {len(families)} font families: {', '.join(f.name for f in families)}")

    sentences = load_sentences(config.sentences_file)
    if not sentences:
        raise ConfigurationError(f"No sentences found in {config.sentences_file}. Please add some sentences.")
    logger.info(f"Loaded {len(sentences)} sentences")

    image_files = list_background_images(config.image_dir)
    logger.info(f"Found {len(image_files)} background images in {config.image_dir}")

    pipeline = StylePipeline.from_config(config)
    builder = ImageSpecBuilder(pipeline, config, image_files=image_files, image_dir=config.image_dir)

    output_dir = Path(config.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    browser_executable = os.environ.get("CHROME_EXECUTABLE_PATH")
    logger.info(f"Launching {config.concurrent_tabs} renderers")
    renderers = queue.Queue()
    t0 = time.time()
    rows = []
    try:
        for _ in range(config.concurrent_tabs):
            renderers.put(Renderer(browser_executable=browser_executable, timeout=config.render_timeout, debug=debug))

        for family in families:
            fonts = [load_font_file(family, path) for path in family.files]
            jobs = [
                (i, fonts[np.random.randint(len(fonts))], sentences[np.random.randint(len(sentences))])
                for i in range(config.images_per_font)
            ]
            f_with_builder = partial(worker_fn, builder=builder, renderers=renderers, output_dir=output_dir, debug=debug)
            results = thread_map(f_with_builder, jobs, max_workers=config.concurrent_tabs, desc=family.name)
            rows.extend(res for res in results if res is not None)
    finally:
        while not renderers.empty():
            renderers.get().close()

    logger.info(f"Generated {len(rows)} images for {len(families)} fonts in {time.time() - t0:0.1f} s")
    if not rows:
        logger.warning("No images generated.")
        return

    labels_path = output_dir / "labels.csv"
    pd.DataFrame(rows, columns=LABEL_COLUMNS).to_csv(labels_path, index=False)
    logger.info(f"Labels written to {labels_path}")


if __name__ == "__main__":
    fire.Fire(run)
