import typer
from pathlib import Path
from typing import Optional
from pydantic import ValidationError
from rich.console import Console

from vbt.config.loader import load_config
from vbt.config.models import AppConfig
from vbt.domain.errors import NoInputFound, ToolUnavailable
from vbt.infrastructure.logging import setup_logging
from vbt.infrastructure.event_bus import EventBus
from vbt.infrastructure.file_scanner import FileScanner
from vbt.infrastructure.path_mapper import PathMapper
from vbt.infrastructure.ffmpeg import FFmpegAdapter
from vbt.pipeline.runner import BatchRunner
from vbt.ui.progress import ProgressDisplay
from vbt.ui.reporter import SummaryReporter

app = typer.Typer(help="VBT (Video Batch Transform) - resize, re-time and watermark a video tree with ffmpeg")


def apply_overrides(config: AppConfig, general: dict, watermark: dict) -> AppConfig:
    """Returns a re-validated copy of config with CLI overrides applied."""
    data = config.model_dump()
    data["general"].update({k: v for k, v in general.items() if v is not None})
    data["watermark"].update({k: v for k, v in watermark.items() if v is not None})
    return AppConfig(**data)


@app.command()
def process(
    config_path: Path = typer.Option(Path("conf/vbt.yaml"), "--config", "-c", help="Path to YAML config"),
    input_dir: Optional[Path] = typer.Option(None, "--input-dir", "-i", help="Directory with source videos"),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", "-o", help="Directory for transformed videos"),
    resolution: Optional[str] = typer.Option(None, "--resolution", "-r", help='Target WIDTHxHEIGHT ("" keeps the source size)'),
    fps: Optional[int] = typer.Option(None, "--fps", help="Target frame rate"),
    overwrite: Optional[bool] = typer.Option(None, "--overwrite/--no-overwrite", help="Overwrite or skip existing outputs"),
    watermark: Optional[bool] = typer.Option(None, "--watermark/--no-watermark", help="Enable/disable the watermark overlay"),
    watermark_image: Optional[Path] = typer.Option(None, "--watermark-image", help="Watermark image file"),
    threads: Optional[int] = typer.Option(None, "--threads", "-t", help="Number of concurrent ffmpeg processes"),
    log_path: Optional[Path] = typer.Option(None, "--log-path", help="Path to log file (overrides config)"),
    debug: Optional[bool] = typer.Option(None, "--debug/--no-debug", help="Enable/disable verbose debug logging"),
):
    """Transform every video under the input directory into the output directory."""
    try:
        config = load_config(config_path)
        config = apply_overrides(
            config,
            general={
                "input_dir": str(input_dir) if input_dir is not None else None,
                "output_dir": str(output_dir) if output_dir is not None else None,
                "resolution": resolution,
                "frame_rate": fps,
                "overwrite": overwrite,
                "threads": threads,
                "log_path": str(log_path) if log_path is not None else None,
                "debug": debug,
            },
            watermark={
                "enabled": watermark,
                "image": str(watermark_image) if watermark_image is not None else None,
            },
        )
    except (FileNotFoundError, ValueError, ValidationError) as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    general = config.general
    input_root = Path(general.input_dir)
    if not input_root.is_dir():
        typer.secho(f"Error: Input directory {input_root} does not exist.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    logger = setup_logging(Path(general.log_path), debug=general.debug)
    logger.info(f"VBT started: input={general.input_dir}, output={general.output_dir}")
    logger.info(
        f"Config: resolution={general.resolution or 'source'}, fps={general.frame_rate}, "
        f"overwrite={general.overwrite}, threads={general.threads}, "
        f"watermark={config.watermark.image if config.watermark.enabled else 'off'}"
    )
    if config.watermark.enabled and not Path(config.watermark.image).is_file():
        logger.warning(f"Watermark image not found: {config.watermark.image}")
        typer.secho(f"Warning: watermark image {config.watermark.image} not found", fg=typer.colors.YELLOW, err=True)

    console = Console()
    bus = EventBus()
    # Subscribed first so the progress line is finalized before the summary prints
    display = ProgressDisplay(bus, console=console)
    SummaryReporter(bus, Path(general.log_path), console=console)
    output_root = Path(general.output_dir)

    runner = BatchRunner(
        config=config,
        event_bus=bus,
        file_scanner=FileScanner(exclude_dir=output_root),
        path_mapper=PathMapper(input_root, output_root),
        ffmpeg_adapter=FFmpegAdapter(general.ffmpeg_path),
    )

    try:
        with display:
            runner.run()
    except (ToolUnavailable, NoInputFound) as e:
        logger.error(f"Fatal: {e}")
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    except KeyboardInterrupt:
        logger.info("Stopped by user (Ctrl+C)")
        typer.secho("\n✓ Processing stopped by user (Ctrl+C)", fg=typer.colors.YELLOW)
        raise typer.Exit(code=130)
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        typer.secho(f"Fatal Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

if __name__ == "__main__":
    app()
