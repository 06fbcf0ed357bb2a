from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Coroutine, TypeVar

import typer

from ..config import AppConfig, load_config
from ..core import ConversionService
from ..errors import ConversionError
from ..logging import configure_logging
from ..settings import get_settings

logger = logging.getLogger(__name__)

app = typer.Typer(help="Image to data URI converter.", no_args_is_help=True)

T = TypeVar("T")

INPUT_HELP_HTML = "Input HTML file path or URL."
INPUT_HELP_IMAGE = "Input image file path or URL."


def _load_config(path: Path | None) -> AppConfig:
    return load_config(path or get_settings().config_path)


def _run(coroutine: Coroutine[Any, Any, T]) -> T:
    """Run a conversion, mapping every failure to a critical log and exit 1."""
    try:
        return asyncio.run(coroutine)
    except ConversionError as exc:
        logger.critical("%s: %s", exc.code, exc)
        raise typer.Exit(1) from exc
    except KeyboardInterrupt as exc:
        logger.critical("conversion cancelled")
        raise typer.Exit(1) from exc
    except Exception as exc:
        logger.critical("%s", exc, exc_info=exc)
        raise typer.Exit(1) from exc


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(logging.DEBUG if verbose else logging.INFO)


@app.command()
def html(
    input: str = typer.Option(..., "--input", "-i", help=INPUT_HELP_HTML),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output HTML file path."),
    js: bool = typer.Option(False, "--js", help="Run page scripts so lazy-loaded images resolve."),
    config: Path | None = typer.Option(None, "--config", help="Path to config.toml"),
) -> None:
    """Inline the src of every img and embed element in an HTML document."""
    logger.info("input: %s", input)
    service = ConversionService(_load_config(config))

    async def convert() -> Path:
        result = await service.convert_html(input, use_script_engine=js)
        if result.kept:
            logger.info("kept %d sources unchanged", len(result.kept))
        return await service.write_html(result, output)

    output_path = _run(convert())
    logger.info("output: %s", output_path)


@app.command()
def image(
    input: str = typer.Option(..., "--input", "-i", help=INPUT_HELP_IMAGE),
    config: Path | None = typer.Option(None, "--config", help="Path to config.toml"),
) -> None:
    """Print the data URI of a single image."""
    logger.info("input: %s", input)
    service = ConversionService(_load_config(config))
    data_uri = _run(service.convert_image(input))
    logger.info("output:")
    typer.echo(data_uri)


if __name__ == "__main__":
    app()
