import pytest
from pydantic import ValidationError
from vbt.config.models import AppConfig, GeneralConfig, WatermarkConfig, WATERMARK_POSITIONS

def test_valid_config():
    data = {
        "general": {
            "input_dir": "videos",
            "output_dir": "videos_small",
            "resolution": "1280x720",
            "frame_rate": 30,
            "overwrite": True,
        },
        "watermark": {
            "enabled": True,
            "image": "logo.png",
            "scale": 0.25,
            "position": "0:0",
        }
    }
    config = AppConfig(**data)
    assert config.general.resolution == "1280x720"
    assert config.general.frame_rate == 30
    assert config.watermark.enabled is True
    assert config.watermark.scale == 0.25

def test_config_defaults():
    config = AppConfig()
    assert config.general.input_dir == "in_videos"
    assert config.general.output_dir == "out_videos"
    assert config.general.resolution == "720x404"
    assert config.general.frame_rate == 24
    assert config.general.overwrite is False
    assert config.general.log_path == "video_processing.log"
    assert config.general.threads == 1
    assert config.watermark.enabled is False
    assert config.watermark.position == "W-w:0"

@pytest.mark.parametrize("value", ["", "   ", None])
def test_empty_resolution_means_keep_source(value):
    assert GeneralConfig(resolution=value).resolution is None

@pytest.mark.parametrize("value", ["640x360", "1280:720", "-2x720", " 640x360 "])
def test_resolution_accepted_forms(value):
    assert GeneralConfig(resolution=value).resolution == value.strip()

@pytest.mark.parametrize("value", ["640", "640x", "wide", "640x360;rm"])
def test_invalid_resolution(value):
    with pytest.raises(ValidationError):
        GeneralConfig(resolution=value)

def test_invalid_frame_rate():
    with pytest.raises(ValidationError):
        GeneralConfig(frame_rate=0)

def test_invalid_threads():
    with pytest.raises(ValidationError):
        GeneralConfig(threads=0)

@pytest.mark.parametrize("scale", [0.0, -0.5, 1.5])
def test_invalid_watermark_scale(scale):
    with pytest.raises(ValidationError):
        WatermarkConfig(enabled=True, scale=scale)

def test_watermark_position_presets_expand():
    assert WatermarkConfig(position="center").position == "(W-w)/2:(H-h)/2"
    assert WatermarkConfig(position="Bottom-Right").position == "W-w:H-h"
    assert WatermarkConfig(position="W-w-10:H-h-10").position == "W-w-10:H-h-10"
    assert len(WATERMARK_POSITIONS) == 9

def test_enabled_watermark_requires_image():
    with pytest.raises(ValidationError):
        WatermarkConfig(enabled=True, image=" ")
    # Disabled watermark settings are never used, so an empty image is fine
    assert WatermarkConfig(enabled=False, image="").enabled is False

def test_config_is_immutable():
    config = AppConfig()
    with pytest.raises(ValidationError):
        config.general.frame_rate = 60

def test_load_config(config_yaml_path):
    from vbt.config.loader import load_config
    config = load_config(config_yaml_path)
    assert config.general.frame_rate == 25
    assert config.general.resolution == "640x360"
    assert config.watermark.enabled is False

def test_load_config_watermark_shorthand(tmp_path):
    f = tmp_path / "vbt.yaml"
    f.write_text("""
general:
  resolution: ""
watermark: brand.png
""")
    from vbt.config.loader import load_config
    config = load_config(f)
    assert config.general.resolution is None
    assert config.watermark.enabled is True
    assert config.watermark.image == "brand.png"

def test_load_config_missing_file(tmp_path):
    from vbt.config.loader import load_config
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.yaml")

def test_load_config_empty_file(tmp_path):
    f = tmp_path / "empty.yaml"
    f.write_text("")
    from vbt.config.loader import load_config
    assert load_config(f) == AppConfig()

@pytest.mark.parametrize("input_dir,output_dir", [
    ("videos", "videos"),
    ("videos", "./videos"),
    ("videos", "videos/"),
])
def test_output_dir_must_differ_from_input_dir(input_dir, output_dir):
    with pytest.raises(ValidationError, match="must differ"):
        GeneralConfig(input_dir=input_dir, output_dir=output_dir)

def test_nested_output_dir_is_allowed():
    config = GeneralConfig(input_dir="videos", output_dir="videos/small")
    assert config.output_dir == "videos/small"
