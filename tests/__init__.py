"""The tests package for the OCR image generator.

This package contains the unit and integration tests for the `ocr_image_gen`
package. The tests are written using the `pytest` framework and cover the
color utilities, the readable text color selector, the style effects and
pipeline, the image spec builder, the configuration, the asset providers, the
renderer and the batch runner.
"""
