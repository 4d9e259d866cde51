"""Tests for config loading, validation and CLI overrides."""

import pytest

from core.config import AppConfig, Config, EdgeConfig, load_config, with_overrides
from core.models import CaptureParams


def _write(tmp_path, text):
    path = tmp_path / "config.toml"
    path.write_text(text)
    return path


def test_missing_file_gives_defaults(tmp_path):
    config = load_config(tmp_path / "nope.toml")
    assert config == Config()
    assert config.capture == CaptureParams(device=0, width=320, height=240, datatype="CV_8UC3")
    assert config.edges == EdgeConfig(300.0, 100.0, 3, True)


def test_partial_file_fills_in_defaults(tmp_path):
    path = _write(tmp_path, "[capture]\nwidth = 640\nheight = 480\n\n[app]\nlog_level = 'DEBUG'\n")
    config = load_config(path)
    assert config.capture.width == 640
    assert config.capture.height == 480
    assert config.capture.device == 0
    assert config.edges == EdgeConfig()
    assert config.app == AppConfig(log_level="DEBUG")


def test_edges_section(tmp_path):
    path = _write(tmp_path, "[edges]\nlow_threshold = 50.0\nhigh_threshold = 150.0\naperture = 5\n")
    edges = load_config(path).edges
    assert edges.low_threshold == 50.0
    assert edges.high_threshold == 150.0
    assert edges.aperture == 5
    assert edges.l2_gradient is True


def test_unknown_keys_are_ignored(tmp_path, caplog):
    path = _write(tmp_path, "[capture]\nfps = 30\ndevice = 1\n")
    assert load_config(path).capture.device == 1
    assert "fps" in caplog.text


@pytest.mark.parametrize(
    "text",
    [
        "[capture]\nwidth = 0\n",
        "[capture]\ndevice = -1\n",
        "[capture]\ndatatype = 'CV_16UC3'\n",
        "[edges]\naperture = 4\n",
        "[app]\nlog_level = 'LOUD'\n",
    ],
)
def test_invalid_values_raise(tmp_path, text):
    with pytest.raises(ValueError):
        load_config(_write(tmp_path, text))


def test_malformed_toml_raises_value_error(tmp_path):
    with pytest.raises(ValueError):
        load_config(_write(tmp_path, "[capture\nwidth = "))


def test_overrides_apply_only_given_values():
    config = with_overrides(Config(), device=2, width=None, height=480)
    assert config.capture == CaptureParams(device=2, width=320, height=480)


def test_no_overrides_returns_same_object():
    config = Config()
    assert with_overrides(config, device=None) is config


def test_overrides_are_validated():
    with pytest.raises(ValueError):
        with_overrides(Config(), width=-5)


@pytest.mark.parametrize(
    "text",
    [
        "[capture]\nwidth = 'wide'\n",
        "[capture]\ndevice = 1.5\n",
        "[capture]\ndevice = true\n",
        "[edges]\nl2_gradient = 1\n",
        "[edges]\nlow_threshold = 'high'\n",
        "[app]\nseed_label = 42\n",
    ],
)
def test_wrong_value_type_raises_value_error(tmp_path, text):
    with pytest.raises(ValueError, match="must be"):
        load_config(_write(tmp_path, text))


@pytest.mark.parametrize("text", ["capture = 3\n", "edges = 'fast'\n", "app = [1, 2]\n"])
def test_section_that_is_not_a_table_raises_value_error(tmp_path, text):
    with pytest.raises(ValueError, match="must be a table"):
        load_config(_write(tmp_path, text))


def test_int_accepted_for_float_field(tmp_path):
    path = _write(tmp_path, "[edges]\nlow_threshold = 50\n")
    edges = load_config(path).edges
    assert edges.low_threshold == 50.0
    assert isinstance(edges.low_threshold, float)
