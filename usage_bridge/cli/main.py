"""
CLI interface for Usage Bridge.

Provides command-line access to limit lookup and usage translation.
"""

import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import typer
import yaml
from rich.console import Console
from rich.table import Table

from usage_bridge.config.loader import load_bridge_config
from usage_bridge.core.limits import resolve_limit
from usage_bridge.core.scaling import TARGET_MAX, scale
from usage_bridge.core.token_counter import RawUsage, TranslatedUsage
from usage_bridge.sdk.reporter import UsageReporter

app = typer.Typer()
console = Console()

EXIT_CODE_OK = 0
EXIT_CODE_FAIL = 1

# Raw usage ratios shown by the curve command
CURVE_RATIOS = (0.1, 0.25, 0.5, 0.6, 0.7, 0.8, 0.85, 0.9, 1.0, 1.2)


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context):
    """Usage Bridge CLI."""
    if ctx.invoked_subcommand is None:
        console.print("Usage Bridge - Use --help to see available commands")


@app.command()
def limit(model: str = typer.Argument(..., help="Backend model identifier")):
    """Show the context limit resolved for a model."""
    console.print(f"{model}: {resolve_limit(model):,} tokens")


@app.command()
def translate(
    model: Optional[str] = typer.Option(
        None,
        "--model",
        "-m",
        help="Backend model identifier (overrides the config file)"
    ),
    prompt_tokens: Optional[int] = typer.Option(
        None,
        "--prompt-tokens",
        "-p",
        help="Raw prompt tokens"
    ),
    cached_tokens: Optional[int] = typer.Option(
        None,
        "--cached-tokens",
        "-c",
        help="Raw cached prompt tokens"
    ),
    output_tokens: Optional[int] = typer.Option(
        None,
        "--output-tokens",
        "-o",
        help="Raw output tokens"
    ),
    metadata: Optional[Path] = typer.Option(
        None,
        "--metadata",
        help="JSON file holding a usageMetadata object"
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        help="YAML bridge configuration"
    ),
    no_scaling: bool = typer.Option(
        False,
        "--no-scaling",
        help="Report raw usage without scaling"
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the client usage object as JSON"
    )
):
    """
    Translate raw backend usage into client usage.

    Counts come from --metadata or from the individual token options;
    options given explicitly override values read from the file.
    """
    try:
        scaling_enabled = True
        if config is not None:
            bridge_config = load_bridge_config(str(config))
            model = model or bridge_config.model
            scaling_enabled = bridge_config.scaling_enabled
        if no_scaling:
            scaling_enabled = False

        if not model:
            raise ValueError("A model is required (--model or --config)")

        raw = RawUsage()
        if metadata is not None:
            raw = RawUsage.from_usage_metadata(_read_usage_metadata(metadata))
        raw = RawUsage(
            prompt_tokens=_pick(prompt_tokens, raw.prompt_tokens),
            cached_tokens=_pick(cached_tokens, raw.cached_tokens),
            output_tokens=_pick(output_tokens, raw.output_tokens),
            total_tokens=raw.total_tokens
        )

        reporter = UsageReporter(model=model, scaling_enabled=scaling_enabled)
        usage = reporter.report(raw)
    except (ValueError, OSError, yaml.YAMLError) as e:
        console.print(f"[red]Error:[/] {str(e)}")
        sys.exit(EXIT_CODE_FAIL)

    if as_json:
        typer.echo(json.dumps(usage.to_dict(), indent=2))
    else:
        _display_usage(reporter, raw, usage)
    sys.exit(EXIT_CODE_OK)


@app.command()
def curve(model: str = typer.Argument(..., help="Backend model identifier")):
    """Show how raw usage maps to client-visible usage for a model."""
    context_limit = resolve_limit(model)

    table = Table(title=f"Display curve for {model} ({context_limit:,} tokens)")
    table.add_column("Raw ratio", justify="right")
    table.add_column("Raw tokens", justify="right")
    table.add_column("Displayed tokens", justify="right")
    table.add_column("Display ratio", justify="right")

    for ratio in CURVE_RATIOS:
        raw_tokens = int(ratio * context_limit)
        scaled_total = scale(raw_tokens, context_limit, True, observer=None)
        table.add_row(
            f"{ratio:.0%}",
            f"{raw_tokens:,}",
            f"{scaled_total:,}",
            f"{scaled_total / TARGET_MAX:.1%}"
        )

    console.print(table)


def _pick(explicit: Optional[int], fallback: Optional[int]) -> Optional[int]:
    """Prefer an explicitly given count over one read from file."""
    return explicit if explicit is not None else fallback


def _read_usage_metadata(path: Path) -> Dict[str, Any]:
    """Read a usageMetadata object from a JSON file.

    Accepts the object itself, a response carrying ``usageMetadata``, or an
    envelope carrying ``response.usageMetadata``.
    """
    if not path.is_file():
        raise FileNotFoundError(f"Metadata file not found: {path}")

    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in metadata file {path}: {e}")

    if isinstance(data, dict) and isinstance(data.get("response"), dict):
        data = data["response"]
    if isinstance(data, dict) and "usageMetadata" in data:
        data = data["usageMetadata"]
    return data


def _display_usage(reporter: UsageReporter, raw: RawUsage, usage: TranslatedUsage):
    """Display raw and translated usage side by side."""
    console.print(f"\n[bold]Model:[/bold] {reporter.model} ({reporter.context_limit:,} tokens)")
    console.print(f"[bold]Scaling:[/bold] {'on' if reporter.scaling_enabled else 'off'}")

    table = Table()
    table.add_column("Field")
    table.add_column("Raw", justify="right")
    table.add_column("Reported", justify="right")

    cache_read = usage.cache_read_tokens
    table.add_row("Prompt tokens", _format_count(raw.prompt_tokens), f"{usage.total_input_tokens:,}")
    table.add_row("Input tokens", "", f"{usage.input_tokens:,}")
    table.add_row("Cache read tokens", _format_count(raw.cached_tokens), _format_count(cache_read))
    table.add_row("Cache creation tokens", "", _format_count(usage.cache_creation_tokens))
    table.add_row("Output tokens", _format_count(raw.output_tokens), f"{usage.output_tokens:,}")

    console.print(table)


def _format_count(value: Optional[int]) -> str:
    """Format an optional token count."""
    return "-" if value is None else f"{value:,}"


if __name__ == "__main__":
    app()
