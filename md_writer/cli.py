"""
Command line interface for md-writer.
Converts custom tag syntax to Markdown, previews and analyzes Markdown files,
and forwards files to an AI provider for suggestions, corrections, or expansion.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path

import click
from . import __version__
from .analyzer import analyze, generate_report
from .assistant import TASKS, Assistant
from .config import API_KEY_ENV_VAR, ConfigError, WriterConfig, build_config, build_tag_table
from .constants import BLOCK_LABELS, EXAMPLE_INPUT, REPORT_FORMATS
from .exceptions import AssistantError
from .filesystem import (
    get_max_file_size,
    normalize_filepath,
    read_text,
    resolve_output_path,
    stats_report_path,
    suffixed_path,
    write_text,
)
from .translator import describe_error, generate_markdown, group_aliases, suggest_filename, translate

__all__ = ["cli"]

END_OF_INPUT = "END"


@click.group()
@click.version_option(version=__version__, prog_name="md-writer")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def cli(verbose: bool = False):
    """Convert custom syntax to Markdown and analyze Markdown files."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_config(**overrides: object) -> WriterConfig:
    try:
        return build_config(Path.cwd(), **overrides)
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error


def _resolve_input(raw_path: str, markdown_only: bool = True) -> Path:
    base_dir = Path.cwd().resolve()
    try:
        if markdown_only:
            return normalize_filepath(raw_path, base_dir)
        return normalize_filepath(raw_path, base_dir, extensions=None)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error


def _read_input(filepath: Path, config: WriterConfig) -> str:
    try:
        max_file_size = get_max_file_size(default=config.max_file_size)
    except ValueError as error:
        raise click.ClickException(str(error)) from error
    try:
        return read_text(filepath, max_file_size)
    except IOError as error:
        raise click.ClickException(str(error)) from error


def _write_output(filepath: Path, content: str) -> Path:
    try:
        written = write_text(filepath, content)
    except IOError as error:
        raise click.ClickException(str(error)) from error
    click.echo(click.style(f"File saved: {written}", fg="green"), err=True)
    return written


def _prompt_lines() -> str:
    click.echo(
        f'Enter your content line by line. Type "{END_OF_INPUT}" on a new line to finish.',
        err=True,
    )
    lines: list[str] = []
    while True:
        line = click.prompt(f"Line {len(lines) + 1}", default="", show_default=False, err=True)
        if line.strip().upper() == END_OF_INPUT:
            break
        if line.strip():
            lines.append(line)
    return "\n".join(lines)


def _style_markdown_line(line: str) -> str:
    if line.startswith("#"):
        return click.style(line, fg="cyan", bold=True)
    if line.startswith(("-", "*")):
        return click.style(line, fg="green")
    if line.startswith(">"):
        return click.style(line, fg="yellow")
    return line


def _style_report_line(line: str) -> str:
    if line.endswith(":") and not line.startswith(" "):
        return click.style(line, fg="yellow", bold=True)
    return line


@cli.command()
@click.argument("source", required=False)
@click.option("--example", is_flag=True, help="Convert the built-in example instead of SOURCE")
@click.option("--save", is_flag=True, help="Write the Markdown to a file instead of stdout")
@click.option("-o", "--output", help="Output filename (defaults to the first tag, e.g. AAA.md)")
@click.option("--output-dir", help="Directory for the output file")
def convert(
    source: str | None = None,
    example: bool = False,
    save: bool = False,
    output: str | None = None,
    output_dir: str | None = None,
):
    """
    Convert custom syntax such as ``AAA(Title)`` to Markdown.

    Args:
        source: File holding custom syntax; ``-`` or omitted reads stdin, and
            an interactive terminal is prompted line by line.
        example: Convert the built-in example content.
        save: Write the result to a file rather than printing it.
        output: Output filename used with `save`.
        output_dir: Directory used with `save`, overriding configuration.

    Raises:
        click.BadParameter: If SOURCE or the configuration is invalid.
        click.ClickException: If no line could be translated or the output
            cannot be written.

    Examples:
        md-writer convert notes.txt --save -o notes
        printf 'AAA(Title)\\nDDD(Item)' | md-writer convert
    """
    config = _load_config(output_dir=output_dir)
    table = build_tag_table(config)

    if example:
        text = EXAMPLE_INPUT
    elif source is None or source == "-":
        stdin = click.get_text_stream("stdin")
        text = _prompt_lines() if stdin.isatty() else stdin.read()
    else:
        text = _read_input(_resolve_input(source, markdown_only=False), config)

    result = translate(text, table)
    for error in result.errors:
        click.echo(click.style(describe_error(error), fg="red"), err=True)

    if not result.lines:
        raise click.ClickException("No valid content to process")

    markdown = generate_markdown(result.lines)
    if not save:
        click.echo(markdown)
        return

    target_dir = Path(config.output_dir)
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        target = resolve_output_path(output or suggest_filename(result.lines), target_dir)
    except (OSError, ValueError) as error:
        raise click.BadParameter(str(error)) from error
    _write_output(target, markdown)


@cli.command()
@click.argument("filepath")
@click.option("-n", "--lines", "line_count", type=int, help="Number of lines to show")
def preview(filepath: str, line_count: int | None = None):
    """Show file information and the first lines of a Markdown file."""
    config = _load_config(preview_lines=line_count)
    path = _resolve_input(filepath)
    content = _read_input(path, config)
    file_stat = path.stat()

    click.echo(click.style("File Information:", fg="yellow", bold=True))
    click.echo(f"   Path: {path}")
    click.echo(f"   Size: {file_stat.st_size / 1024:.2f} KB")
    click.echo(f"   Modified: {datetime.fromtimestamp(file_stat.st_mtime).date().isoformat()}")
    click.echo()
    click.echo(click.style("Content Preview:", fg="yellow", bold=True))

    lines = content.split("\n")
    for line in lines[: config.preview_lines]:
        click.echo(_style_markdown_line(line))
    if len(lines) > config.preview_lines:
        click.echo(click.style(f"\n... and {len(lines) - config.preview_lines} more lines", dim=True))


@cli.command()
@click.argument("filepath")
@click.option(
    "--format", "report_format", type=click.Choice(REPORT_FORMATS), help="Report format"
)
@click.option("--save", is_flag=True, help="Also write a <name>-stats.json report")
def stats(filepath: str, report_format: str | None = None, save: bool = False):
    """
    Print statistics for a Markdown file.

    Args:
        filepath: Markdown file to analyze.
        report_format: ``console`` or ``json``; defaults to the configured
            `stats_format`.
        save: Write the JSON report next to the file.

    Examples:
        md-writer stats README.md --format json
    """
    config = _load_config(stats_format=report_format)
    path = _resolve_input(filepath)
    analysis = analyze(_read_input(path, config))

    # Rendered once so the printed and saved reports share a timestamp.
    json_report = None
    if save or config.stats_format == "json":
        json_report = generate_report(analysis, "json")

    if config.stats_format == "json":
        click.echo(json_report)
    else:
        report = generate_report(analysis, config.stats_format)
        click.echo("\n".join(_style_report_line(line) for line in report.splitlines()))

    if save:
        _write_output(stats_report_path(path), json_report)


@cli.command()
def guide():
    """List the supported custom syntax."""
    config = _load_config()
    table = build_tag_table(config)

    click.echo(click.style("Supported syntax:", fg="yellow", bold=True))
    for markdown, prefixes in group_aliases(table).items():
        label = BLOCK_LABELS.get(markdown, markdown)
        variants = ", ".join(f"{prefix}(text)" for prefix in prefixes)
        click.echo(f"   {variants} -> {markdown} text  ({label})")


@cli.command("ai")
@click.argument("task", type=click.Choice(sorted(TASKS)))
@click.argument("filepath")
def ai_command(task: str, filepath: str):
    """
    Send a Markdown file to the AI provider.

    TASK is ``suggest``, ``grammar`` or ``expand``. The reply is saved next
    to the file with a ``-suggestions``, ``-corrected`` or ``-expanded``
    suffix.
    """
    config = _load_config()
    path = _resolve_input(filepath)
    content = _read_input(path, config)

    assistant = Assistant(config, api_key=os.environ.get(API_KEY_ENV_VAR))
    if not assistant.is_configured:
        raise click.ClickException(
            f"AI features need an OpenRouter API key. Set {API_KEY_ENV_VAR}, "
            'or set provider = "ollama" to use a local model.'
        )

    click.echo(click.style(f"Running AI {task} on: {path}", fg="blue"), err=True)
    try:
        reply = assistant.run(task, content)
    except AssistantError as error:
        raise click.ClickException(str(error)) from error

    _write_output(suffixed_path(path, TASKS[task].suffix), reply)


if __name__ == "__main__":
    cli()
