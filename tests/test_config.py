"""Tests for the configuration loader and its Pydantic schemas."""

import pytest
import yaml
from pydantic import ValidationError

from ocr_image_gen.config import CONFIG_PATH, GeneratorConfig, IntRange, load_config


@pytest.fixture
def config_file(tmp_path):
    """Writes a small YAML configuration and returns its path."""
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "images_per_font": 7,
                "concurrent_tabs": 2,
                "effects": {"stroke": 0.9, "rotation": 0.0},
                "text": {"font_size": {"min": 30, "max": 40}},
            }
        ),
        encoding="utf-8",
    )
    return path


def test_default_config_file_matches_schema_defaults():
    """Tests that the shipped config.yaml loads and agrees with the schema defaults."""
    assert CONFIG_PATH.exists()
    config = load_config()
    defaults = GeneratorConfig()
    assert config.images_per_font == defaults.images_per_font
    assert config.effects == defaults.effects
    assert config.image == defaults.image


def test_load_config_from_yaml(config_file):
    """Tests that YAML values override the defaults and the rest is preserved."""
    config = load_config(config_file)
    assert config.images_per_font == 7
    assert config.concurrent_tabs == 2
    assert config.effects.stroke == 0.9
    assert config.effects.rotation == 0.0
    assert config.effects.background_color == 1.0
    assert config.text.font_size == IntRange(min=30, max=40)
    assert config.text.direction == "rtl"


def test_environment_overrides_yaml(config_file, monkeypatch):
    """Tests that environment variables take precedence over the YAML file."""
    monkeypatch.setenv("OCR_IMAGE_GEN_CONCURRENT_TABS", "8")
    monkeypatch.setenv("OCR_IMAGE_GEN_EFFECTS__STROKE", "0.5")
    config = load_config(config_file)
    assert config.concurrent_tabs == 8
    assert config.effects.stroke == 0.5
    # siblings of an overridden nested value keep their YAML value
    assert config.effects.rotation == 0.0
    assert config.images_per_font == 7


def test_explicit_overrides_win(config_file, monkeypatch):
    """Tests that keyword overrides beat both the environment and the YAML file."""
    monkeypatch.setenv("OCR_IMAGE_GEN_CONCURRENT_TABS", "8")
    config = load_config(config_file, concurrent_tabs=3, images_per_font=None)
    assert config.concurrent_tabs == 3
    assert config.images_per_font == 7


def test_missing_config_file_uses_defaults(tmp_path):
    """Tests that a missing YAML file falls back to the schema defaults."""
    config = load_config(tmp_path / "missing.yaml")
    assert config.images_per_font == 100


def test_inverted_range_is_rejected():
    """Tests that a range whose minimum exceeds its maximum is invalid."""
    with pytest.raises(ValidationError):
        IntRange(min=10, max=1)


def test_invalid_values_in_yaml(tmp_path):
    """Tests that invalid probabilities and JPEG qualities are reported on load."""
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"effects": {"stroke": 1.5}}), encoding="utf-8")
    with pytest.raises(ValidationError):
        load_config(path)

    path.write_text(yaml.safe_dump({"image": {"quality": {"min": 50, "max": 120}}}), encoding="utf-8")
    with pytest.raises(ValidationError):
        load_config(path)


def test_environment_overrides_one_bound_of_a_range(monkeypatch):
    """Tests that an environment variable may set one bound of a range from the YAML file."""
    monkeypatch.setenv("OCR_IMAGE_GEN_IMAGE__WIDTH__MIN", "500")
    config = load_config()
    assert config.image.width == IntRange(min=500, max=1200)
    assert config.image.height == IntRange(min=300, max=800)


def test_environment_overrides_one_bound_of_a_yaml_range(config_file, monkeypatch):
    """Tests that a nested bound from the environment is merged with a custom YAML range."""
    monkeypatch.setenv("OCR_IMAGE_GEN_TEXT__FONT_SIZE__MAX", "35")
    config = load_config(config_file)
    assert config.text.font_size == IntRange(min=30, max=35)
    assert config.effects.stroke == 0.9


def test_environment_bound_is_validated_after_merge(monkeypatch):
    """Tests that a merged range is still checked for order."""
    monkeypatch.setenv("OCR_IMAGE_GEN_IMAGE__WIDTH__MIN", "2000")
    with pytest.raises(ValidationError):
        load_config()
