class ConfigurationError(Exception):
    """Raised when a required external resource is missing or misconfigured.

    Typical causes are image backgrounds being required while the background
    image directory is empty, a fonts directory without any font family, or an
    empty sentences file. The generator fails fast on these instead of
    silently producing a degraded corpus.
    """
    pass


class SkipSample(Exception):
    """A custom exception raised to indicate that a sample should be skipped.

    This exception is used by the rendering and batch layers to signal that a
    particular image cannot be produced, for example because the browser timed
    out or returned an undecodable screenshot. The batch continues with the
    next image and the skipped one is simply absent from the output.
    """
    pass
