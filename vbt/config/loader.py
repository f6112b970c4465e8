import yaml
from pathlib import Path
from .models import AppConfig

def load_config(config_path: Path) -> AppConfig:
    """Loads YAML config and parses it into AppConfig Pydantic model."""
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")

    # A bare `watermark: logo.png` is shorthand for an enabled watermark
    watermark = data.get("watermark")
    if isinstance(watermark, str):
        data["watermark"] = {"enabled": True, "image": watermark}

    return AppConfig(**data)
