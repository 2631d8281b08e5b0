"""Defines the version of the ocr_image_gen package.

The `__version__` variable is read by packaging tools and exposed at the top
level of the package.
"""

__version__ = "0.1.0"
