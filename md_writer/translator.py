"""Translation of the custom tag syntax into Markdown."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

from .constants import DEFAULT_OUTPUT_FILENAME, EXPECTED_FORMAT, TAGGED_LINE_PATTERN
from .models import (
    DEFAULT_TAG_TABLE,
    ErrorKind,
    ParsedLine,
    RecognitionError,
    TagTable,
    TranslationResult,
)


def parse_line(
    line: str, table: TagTable = DEFAULT_TAG_TABLE
) -> ParsedLine | RecognitionError | None:
    """Translate one line of ``PREFIX(content)`` syntax.

    The content group is greedy and anchored to the last ``)``, so nested
    parentheses stay part of the content.

    Args:
        line: A single line of input, surrounding whitespace allowed.
        table: Tag table used to resolve the prefix.

    Returns:
        ParsedLine | RecognitionError | None: The parsed line, a diagnostic
            when the line is malformed or uses an unknown prefix, or None when
            the line is blank.

    Examples:
        parse_line("AAA(Title)").markdown  # "# Title"
        parse_line("ZZZ(Title)").kind  # ErrorKind.UNKNOWN_PREFIX
    """
    trimmed = line.strip()
    if not trimmed:
        return None

    match = TAGGED_LINE_PATTERN.match(trimmed)
    if match is None:
        return RecognitionError(
            kind=ErrorKind.MALFORMED_LINE,
            text=trimmed,
            known_prefixes=table.known_prefixes,
        )

    prefix, raw_content = match.groups()
    if prefix not in table:
        return RecognitionError(
            kind=ErrorKind.UNKNOWN_PREFIX,
            text=trimmed,
            prefix=prefix,
            known_prefixes=table.known_prefixes,
        )

    content = raw_content.strip()
    return ParsedLine(prefix=prefix, content=content, markdown=f"{table[prefix]} {content}")


def translate(text: str, table: TagTable = DEFAULT_TAG_TABLE) -> TranslationResult:
    """Translate a block of custom syntax, keeping diagnostics for bad lines.

    Args:
        text: Input text; any line terminator separates lines.
        table: Tag table used to resolve prefixes.

    Returns:
        TranslationResult: Recognised lines in input order and one
            `RecognitionError` (with its line number) per rejected line.
    """
    result = TranslationResult()
    for line_number, line in enumerate(text.splitlines(), start=1):
        outcome = parse_line(line, table)
        if outcome is None:
            continue
        if isinstance(outcome, RecognitionError):
            result.errors.append(replace(outcome, line_number=line_number))
            continue
        result.lines.append(outcome)
    return result


def parse_input(text: str, table: TagTable = DEFAULT_TAG_TABLE) -> list[ParsedLine]:
    """Translate a block of custom syntax, silently dropping bad lines.

    Examples:
        parse_input("AAA(Title)\\nnot a tag\\nDDD(Item)")  # two ParsedLine values
    """
    return translate(text, table).lines


def generate_markdown(lines: Iterable[ParsedLine]) -> str:
    """Join the Markdown fragments of `lines` with newlines."""
    return "\n".join(line.markdown for line in lines)


def suggest_filename(lines: list[ParsedLine]) -> str:
    """Name the output file after the first recognised tag.

    Examples:
        suggest_filename([])  # "output.md"
    """
    if not lines:
        return DEFAULT_OUTPUT_FILENAME
    return f"{lines[0].prefix}.md"


def describe_error(error: RecognitionError) -> str:
    """Render a diagnostic as plain text.

    Args:
        error: Diagnostic returned by `parse_line` or `translate`.

    Returns:
        str: Two lines: what went wrong and how to fix it.
    """
    location = f"Line {error.line_number}: " if error.line_number is not None else ""
    if error.kind is ErrorKind.UNKNOWN_PREFIX:
        return (
            f'{location}Unknown prefix: "{error.prefix}"\n'
            f"   Supported: {', '.join(error.known_prefixes)}"
        )
    return f'{location}Invalid format: "{error.text}"\n   Expected format: {EXPECTED_FORMAT}'


def group_aliases(table: TagTable = DEFAULT_TAG_TABLE) -> dict[str, list[str]]:
    """Group prefixes by the Markdown prefix they produce, in table order."""
    groups: dict[str, list[str]] = {}
    for prefix, markdown in table.items():
        groups.setdefault(markdown, []).append(prefix)
    return groups
