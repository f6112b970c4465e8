import os
import re
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Overlay coordinate expressions: W/H are the frame size, w/h the watermark size.
WATERMARK_POSITIONS = {
    "center": "(W-w)/2:(H-h)/2",
    "top-center": "(W-w)/2:0",
    "bottom-center": "(W-w)/2:H-h",
    "top-left": "0:0",
    "top-right": "W-w:0",
    "bottom-right": "W-w:H-h",
    "bottom-left": "0:H-h",
    "center-left": "0:(H-h)/2",
    "center-right": "W-w:(H-h)/2",
}

_RESOLUTION_RE = re.compile(r"^-?\d+[x:]-?\d+$")


class GeneralConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    input_dir: str = "in_videos"
    output_dir: str = "out_videos"
    resolution: Optional[str] = "720x404"
    frame_rate: int = Field(default=24, gt=0)
    overwrite: bool = False
    log_path: str = "video_processing.log"
    threads: int = Field(default=1, gt=0)
    ffmpeg_path: str = "ffmpeg"
    debug: bool = False

    @field_validator("resolution")
    @classmethod
    def validate_resolution(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        if not v:
            return None
        if not _RESOLUTION_RE.match(v):
            raise ValueError(f"Invalid resolution '{v}'. Use WIDTHxHEIGHT, e.g. 1280x720.")
        return v

    @field_validator("input_dir", "output_dir", "log_path", "ffmpeg_path")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v

    @model_validator(mode="after")
    def validate_distinct_dirs(self):
        if os.path.abspath(self.input_dir) == os.path.abspath(self.output_dir):
            raise ValueError(f"output_dir must differ from input_dir ({self.input_dir})")
        return self


class WatermarkConfig(BaseModel):
    """Image overlay applied to every output video when enabled."""
    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    image: str = "logo.png"
    scale: float = Field(default=0.1, gt=0.0, le=1.0)
    position: str = "W-w:0"

    @field_validator("position")
    @classmethod
    def expand_position(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Watermark position must not be empty")
        return WATERMARK_POSITIONS.get(v.lower(), v)

    @model_validator(mode="after")
    def validate_image(self):
        if self.enabled and not self.image.strip():
            raise ValueError("Watermark image must be set when the watermark is enabled")
        return self


class AppConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    general: GeneralConfig = Field(default_factory=GeneralConfig)
    watermark: WatermarkConfig = Field(default_factory=WatermarkConfig)
