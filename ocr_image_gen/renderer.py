"""Image rendering backend for the generator.

This module defines the `Renderer` class, which turns the HTML document of a
`RenderRequest` into JPEG bytes. It uses the `html2image` library to drive a
headless Chrome, then re-encodes the screenshot with OpenCV at the requested
JPEG quality.
"""

import os
import tempfile
import threading
import uuid
from concurrent.futures import ThreadPoolExecutor, TimeoutError
from pathlib import Path

import cv2
import numpy as np
from html2image import Html2Image
from loguru import logger

from ocr_image_gen.exceptions import SkipSample

CHROME_FLAGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--hide-scrollbars",
    "--font-render-hinting=none",
    "--disable-background-timer-throttling",
    "--disable-features=CalculateNativeWinOcclusion",
    "--disable-extensions",
    "--disable-notifications",
    "--disable-default-apps",
    "--disable-sync",
    # background images are loaded from file:// URIs
    "--allow-file-access-from-files",
]


def encode_jpeg(img, quality):
    """Encodes a BGR or BGRA image as JPEG bytes at the given quality.

    Args:
        img (np.ndarray): The image as decoded by OpenCV.
        quality (int): The JPEG quality in [0, 100].

    Returns:
        bytes: The JPEG file content.
    """
    if img.ndim == 3 and img.shape[2] == 4:
        img = cv2.cvtColor(img, cv2.COLOR_BGRA2BGR)
    ok, buffer = cv2.imencode(".jpg", img, [int(cv2.IMWRITE_JPEG_QUALITY), int(quality)])
    if not ok:
        raise SkipSample("OpenCV could not encode the screenshot as JPEG")
    return buffer.tobytes()


class Renderer:
    """Renders HTML documents into JPEG images using `html2image`.

    A renderer drives a single browser and serializes its calls with a lock;
    run one renderer per concurrent worker to render in parallel.
    """

    def __init__(self, browser_executable=None, timeout=30, debug=False):
        """Initializes the Renderer.

        Args:
            browser_executable (str | None, optional): The path to the browser executable.
            timeout (float, optional): Seconds to wait for one screenshot.
            debug (bool, optional): If True, keeps the browser's logging enabled.
        """
        self.debug = debug
        self.timeout = timeout
        self.temp_dir = tempfile.TemporaryDirectory(ignore_cleanup_errors=True)

        flags = [*CHROME_FLAGS, f"--user-data-dir={os.path.join(self.temp_dir.name, 'user-data')}"]
        self.hti = Html2Image(
            browser="chrome",
            browser_executable=browser_executable,
            output_path=self.temp_dir.name,
            temp_path=self.temp_dir.name,
            custom_flags=flags,
            disable_logging=not debug,
        )
        self.lock = threading.Lock()
        self.executor = ThreadPoolExecutor(max_workers=1)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        self.executor.shutdown(wait=False)
        self.temp_dir.cleanup()

    def render(self, request):
        """Renders a request into JPEG bytes.

        Args:
            request (RenderRequest): The request to render.

        Returns:
            bytes: The JPEG image.

        Raises:
            SkipSample: If the browser times out, fails, or returns an image
                that cannot be decoded.
        """
        with self.lock:
            img = self._screenshot(request.html, (request.width, request.height))
        return encode_jpeg(img, request.quality)

    def _screenshot(self, html, size):
        """Takes a screenshot of an HTML document and decodes it with OpenCV."""
        filename = f"{uuid.uuid4()}.png"
        screenshot_path = Path(self.temp_dir.name) / filename
        try:
            future = self.executor.submit(self.hti.screenshot, html_str=html, save_as=filename, size=size)
            try:
                future.result(timeout=self.timeout)
            except TimeoutError:
                # a running call cannot be cancelled; leave it to its thread and take a fresh worker
                self.executor.shutdown(wait=False)
                self.executor = ThreadPoolExecutor(max_workers=1)
                raise SkipSample(f"Screenshot timed out after {self.timeout} s") from None
            except Exception as e:
                raise SkipSample(f"Screenshot failed with an exception: {e}") from e

            if not screenshot_path.exists():
                raise SkipSample("The browser did not produce a screenshot")
            img = cv2.imdecode(np.fromfile(str(screenshot_path), np.uint8), cv2.IMREAD_UNCHANGED)
            if img is None:
                raise SkipSample("The screenshot could not be decoded")
            return img
        finally:
            if screenshot_path.exists():
                try:
                    screenshot_path.unlink()
                except OSError as e:
                    logger.warning(f"Error removing temporary screenshot {screenshot_path}: {e}")
