"""JSON envelopes and rich tables for CLI output."""

from __future__ import annotations

import json
from typing import Any

from rich.console import Console
from rich.table import Table

from aicli.ai.base import Model


def generate_envelope(
    content: str = "",
    error: str = "",
    warnings: list[str] | None = None,
) -> dict[str, Any]:
    """Build the ``{success, content, error, warnings}`` result; empty fields are omitted."""
    envelope: dict[str, Any] = {"success": not error}
    if content:
        envelope["content"] = content
    if error:
        envelope["error"] = error
    if warnings:
        envelope["warnings"] = list(warnings)
    return envelope


def render_envelope(envelope: dict[str, Any]) -> str:
    return json.dumps(envelope, ensure_ascii=False)


def render_models_json(models: dict[str, list[dict[str, Any]]]) -> str:
    return json.dumps(models, indent=2, ensure_ascii=False)


def models_table(provider: str, models: list[Model]) -> Table:
    """Rich table for one provider's models."""
    table = Table(
        title=f"{provider.capitalize()} Models",
        show_lines=True,
        header_style="bold cyan",
    )
    table.add_column("Model ID", style="bold yellow", no_wrap=True)
    table.add_column("Description", overflow="ellipsis", max_width=40)
    table.add_column("Context Size", justify="right")
    table.add_column("Vision", justify="center")

    for m in models:
        table.add_row(
            m.id,
            m.description,
            f"{m.context_window:,}",
            "yes" if m.supports_vision else "no",
        )
    return table


def print_models(console: Console, provider: str, models: list[Model]) -> None:
    if not models:
        console.print(f"\n[bold]{provider.capitalize()} Models:[/bold]")
        console.print("  [yellow]No models available[/yellow]")
        return
    console.print(models_table(provider, models))
