import os
import stat
import sys
import pytest
import yaml
from pathlib import Path
from vbt.config.models import AppConfig
from vbt.infrastructure.event_bus import EventBus

# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def sample_config(tmp_path):
    """Returns an AppConfig pointing at tmp_path/in and tmp_path/out."""
    return AppConfig(
        general={
            "input_dir": str(tmp_path / "in"),
            "output_dir": str(tmp_path / "out"),
            "resolution": "640x360",
            "frame_rate": 24,
            "overwrite": False,
            "log_path": str(tmp_path / "vbt.log"),
            "threads": 1,
            "debug": False,
        },
        watermark={
            "enabled": False,
        },
    )

@pytest.fixture
def watermark_config(tmp_path):
    """Returns config with resizing and a top-right watermark."""
    return AppConfig(
        general={
            "input_dir": str(tmp_path / "in"),
            "output_dir": str(tmp_path / "out"),
            "resolution": "720x404",
            "frame_rate": 30,
            "overwrite": True,
            "log_path": str(tmp_path / "vbt.log"),
        },
        watermark={
            "enabled": True,
            "image": "logo.png",
            "scale": 0.2,
            "position": "top-right",
        },
    )

@pytest.fixture
def config_yaml_path(tmp_path):
    """Creates a temporary YAML config file."""
    conf_dir = tmp_path / "conf"
    conf_dir.mkdir()
    conf_file = conf_dir / "vbt.yaml"

    content = {
        'general': {
            'input_dir': str(tmp_path / "in"),
            'output_dir': str(tmp_path / "out"),
            'resolution': '640x360',
            'frame_rate': 25,
            'overwrite': False,
            'log_path': str(tmp_path / "vbt.log"),
            'threads': 1,
        },
        'watermark': {
            'enabled': False,
            'image': 'logo.png',
            'scale': 0.1,
            'position': 'W-w:0',
        }
    }

    with open(conf_file, 'w') as f:
        yaml.dump(content, f)

    return conf_file

# ============================================================================
# EventBus Fixtures
# ============================================================================

@pytest.fixture
def event_bus():
    """Returns a fresh EventBus instance."""
    return EventBus()

# ============================================================================
# File System Fixtures
# ============================================================================

@pytest.fixture
def test_input_dir(tmp_path):
    """Creates a test input directory."""
    input_dir = tmp_path / "in"
    input_dir.mkdir()
    return input_dir

@pytest.fixture
def dummy_video_files(test_input_dir):
    """Creates in/a.mp4, in/sub/b.mov and a non-video file."""
    a = test_input_dir / "a.mp4"
    a.write_bytes(b"dummy video content " * 100)

    subdir = test_input_dir / "sub"
    subdir.mkdir()
    b = subdir / "b.mov"
    b.write_bytes(b"dummy video content " * 100)

    (test_input_dir / "notes.txt").write_text("not a video")
    return [a, b]

@pytest.fixture
def fake_ffmpeg(tmp_path):
    """
    Writes an executable stand-in for ffmpeg.

    It answers -version, fails (exit 1, diagnostics on stderr) for inputs whose
    name contains "broken", and otherwise copies the input to the output path.
    """
    if os.name == "nt":
        pytest.skip("fake ffmpeg script requires a POSIX shell")

    script = tmp_path / "bin" / "ffmpeg"
    script.parent.mkdir()
    script.write_text(
        f"#!{sys.executable}\n"
        "import shutil, sys\n"
        "args = sys.argv[1:]\n"
        "if args == ['-version']:\n"
        "    print('ffmpeg version 6.1-fake')\n"
        "    sys.exit(0)\n"
        "src = args[args.index('-i') + 1]\n"
        "if 'broken' in src:\n"
        "    for i in range(30):\n"
        "        sys.stderr.write(f'diagnostic line {i}\\n')\n"
        "    sys.stderr.write(f'{src}: Invalid data found when processing input\\n')\n"
        "    sys.exit(1)\n"
        "shutil.copyfile(src, args[-1])\n"
    )
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return script


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
