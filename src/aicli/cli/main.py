"""Main CLI commands — generate (gen, ask), models, config."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from aicli import config as config_module
from aicli.ai import dispatch
from aicli.ai.base import ImageInput, Inputs
from aicli.cli.output import generate_envelope, print_models, render_envelope, render_models_json
from aicli.errors import AICLIError, InputError

app = typer.Typer(
    name="ai-cli",
    help=(
        "AI-powered CLI for text and image prompts across OpenAI, DeepSeek and Mistral.\n\n"
        "Examples:\n\n"
        '  ai-cli generate -p "Explain quantum computing"\n\n'
        '  ai-cli generate -p "Describe this image" -i photo.jpg --provider openai'
    ),
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()
err_console = Console(stderr=True)
logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool = False) -> None:
    from aicli.logging_config import configure_logging

    settings = config_module.get_settings()
    level = "DEBUG" if verbose else settings.log_level
    configure_logging(level=level, log_file=settings.log_file or None, json_format=settings.log_json)


def _split_csv(values: list[str] | None) -> list[str]:
    """Flatten repeated and comma-separated option values."""
    items: list[str] = []
    for value in values or []:
        items.extend(part.strip() for part in value.split(",") if part.strip())
    return items


def load_inputs(prompt: str, prompt_file: Path | None, image_paths: list[str]) -> Inputs:
    """Read the prompt (file wins over flag) and image files into an Inputs value."""
    if prompt_file is not None:
        try:
            prompt = prompt_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise InputError(f"failed to read prompt file {prompt_file}: {exc}") from exc
    if not prompt.strip():
        raise InputError("a prompt is required (use --prompt or --prompt-file)")

    images: list[ImageInput] = []
    for raw in image_paths:
        path = Path(raw)
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise InputError(f"failed to read image {raw}: {exc}") from exc
        images.append(ImageInput(data=data, filename=path.name))

    return Inputs(prompt=prompt, images=tuple(images))


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """ai-cli root."""
    _setup_logging(verbose)


# ── generate ──────────────────────────────────────────────────────────

@app.command()
def generate(
    prompt: str = typer.Option("", "--prompt", "-p", help="Text prompt"),
    prompt_file: Optional[Path] = typer.Option(
        None, "--prompt-file", help="Read the prompt from a file (overrides --prompt)"
    ),
    images: Optional[List[str]] = typer.Option(
        None, "--images", "-i", help="Image paths (repeat or comma-separate)"
    ),
    provider: Optional[str] = typer.Option(
        None, "--provider", help="AI provider (openai|deepseek|mistral)"
    ),
    api_key: Optional[str] = typer.Option(
        None, "--apikey", "-k", help="API key (overrides environment variable)"
    ),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Override the text model"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Request timeout in seconds"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug tracing of requests"),
) -> None:
    """Generate a response from a text prompt and optional images."""
    settings = config_module.get_settings()
    if debug:
        _setup_logging(verbose=True)

    warnings: list[str] = []
    if not config_module.ENV_FILE_FOUND:
        warnings.append("No .env file found")

    provider_name = provider or settings.default_provider

    try:
        inputs = load_inputs(prompt, prompt_file, _split_csv(images))
        content = dispatch.generate(
            provider_name,
            inputs,
            api_key=api_key,
            model=model,
            timeout=timeout,
            debug=debug,
            settings=settings,
        )
    except KeyboardInterrupt:
        err_console.print("[yellow]Cancelled[/yellow]")
        raise typer.Exit(130)
    except AICLIError as exc:
        logger.debug("generate failed", exc_info=True)
        if json_output:
            typer.echo(render_envelope(generate_envelope(error=str(exc), warnings=warnings)))
            return
        err_console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(1)

    if json_output:
        typer.echo(render_envelope(generate_envelope(content=content, warnings=warnings)))
    else:
        typer.echo(content)


app.command(name="gen", hidden=True)(generate)
app.command(name="ask", hidden=True)(generate)


# ── models ────────────────────────────────────────────────────────────

@app.command()
def models(
    provider: Optional[List[str]] = typer.Option(
        None, "--provider", help="Providers to list (repeat or comma-separate); default all"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format"),
) -> None:
    """List available models for the supported providers."""
    names = _split_csv(provider) or None

    try:
        listing = dispatch.list_models(names)
    except KeyboardInterrupt:
        err_console.print("[yellow]Cancelled[/yellow]")
        raise typer.Exit(130)

    for message in listing.errors.values():
        err_console.print(f"[bold red]Error:[/bold red] {escape(message)}")

    if json_output:
        typer.echo(render_models_json(listing.as_json()))
    else:
        for name, items in listing.models.items():
            print_models(console, name, items)

    if listing.errors and not listing.models:
        raise typer.Exit(1)


# ── config show ──────────────────────────────────────────────────────

@app.command(name="config")
def config_show() -> None:
    """Print resolved configuration (API keys masked)."""
    settings = config_module.get_settings()

    table = Table(
        title="ai-cli Configuration",
        show_lines=True,
        header_style="bold cyan",
    )
    table.add_column("Setting", style="bold yellow", no_wrap=True)
    table.add_column("Value")

    for key, val in settings.as_display_dict().items():
        table.add_row(key, val)

    console.print(table)
