"""Statistics for Markdown documents."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal

from .constants import (
    CODE_FENCE,
    FORMATTING_CHARACTERS,
    HEADING_LEVELS,
    HEADING_PATTERN,
    IMAGE_PATTERN,
    LINK_PATTERN,
    ORDERED_LIST_PATTERN,
    PARAGRAPH_SEPARATOR_PATTERN,
    QUOTE_MARKER,
    REPORT_FORMATS,
    UNORDERED_LIST_PATTERN,
    WORD_STRIP_PATTERN,
)
from .models import AnalysisStats, StatsAccumulator

REPORT_RULE = "=" * 50


def count_words(line: str) -> int:
    """Count words after removing Markdown punctuation.

    Examples:
        count_words("## Hello *world*")  # 2
    """
    return len(WORD_STRIP_PATTERN.sub("", line).split())


def count_formatting_characters(line: str) -> int:
    return sum(1 for char in line if char in FORMATTING_CHARACTERS)


def count_paragraphs(content: str) -> int:
    """Count blocks separated by one or more blank lines."""
    return sum(1 for block in PARAGRAPH_SEPARATOR_PATTERN.split(content) if block.strip())


def _scan_line(stats: StatsAccumulator, line: str) -> None:
    trimmed = line.strip()

    stats.word_count += count_words(trimmed)

    heading_match = HEADING_PATTERN.match(trimmed)
    if heading_match:
        stats.heading_levels[f"h{len(heading_match.group(1))}"] += 1

    if UNORDERED_LIST_PATTERN.match(trimmed) or ORDERED_LIST_PATTERN.match(trimmed):
        stats.list_item_count += 1

    if trimmed.startswith(QUOTE_MARKER):
        stats.quote_count += 1

    # Each fence line counts, so one fenced block adds 2.
    if trimmed.startswith(CODE_FENCE):
        stats.code_block_count += 1

    # Images also match the link pattern and are counted as both.
    stats.link_count += len(LINK_PATTERN.findall(trimmed))
    stats.image_count += len(IMAGE_PATTERN.findall(trimmed))

    stats.formatting_characters += count_formatting_characters(line)


def _percentage(part: int, total: int) -> float:
    if total == 0:
        return 0.0
    # Halves round up, so 1.25 becomes 1.3 rather than 1.2.
    return float(Decimal(part / total * 100).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def analyze(content: str) -> AnalysisStats:
    """Scan Markdown text and compute structural metrics.

    Blank lines are skipped during line scanning but still count towards the
    character total used for the ratios.

    Args:
        content: Markdown text.

    Returns:
        AnalysisStats: Snapshot of the metrics. Both ratios are 0 when
            `content` is empty.

    Examples:
        stats = analyze("# A\\n\\nText\\n\\n- item\\n")
        stats.paragraph_count  # 3
    """
    stats = StatsAccumulator()

    for line in content.split("\n"):
        if line.strip():
            _scan_line(stats, line)

    total_characters = len(content)
    plain_characters = total_characters - stats.formatting_characters

    return stats.snapshot(
        paragraph_count=count_paragraphs(content),
        plain_text_ratio=_percentage(plain_characters, total_characters),
        formatting_ratio=_percentage(stats.formatting_characters, total_characters),
    )


def average_words_per_paragraph(stats: AnalysisStats) -> str:
    """Format the mean paragraph length, ``"0"`` when there are no paragraphs."""
    if stats.paragraph_count == 0:
        return "0"
    return f"{stats.word_count / stats.paragraph_count:.1f}"


def _console_report(stats: AnalysisStats) -> str:
    report = [
        "Markdown Statistics Report",
        REPORT_RULE,
        "",
        "Content Overview:",
        f"   Word Count: {stats.word_count}",
        f"   Paragraphs: {stats.paragraph_count}",
        f"   List Items: {stats.list_item_count}",
        f"   Quote Lines: {stats.quote_count}",
        "",
        "Structure Analysis:",
    ]
    for number, level in enumerate(HEADING_LEVELS, start=1):
        count = stats.heading_levels[level]
        if count > 0:
            report.append(f"   H{number} Headings: {count}")
    report.extend(
        [
            f"   Total Headings: {stats.total_headings}",
            "",
            "Links & Media:",
            f"   Links: {stats.link_count}",
            f"   Images: {stats.image_count}",
            f"   Code Blocks: {stats.code_block_count}",
            "",
            "Content Analysis:",
            f"   Plain Text: {stats.plain_text_ratio:.1f}%",
            f"   Formatting: {stats.formatting_ratio:.1f}%",
            f"   Avg Words/Paragraph: {average_words_per_paragraph(stats)}",
        ]
    )
    return "\n".join(report)


def _iso_timestamp(moment: datetime | None) -> str:
    # Naive values are taken as local time.
    moment = (moment or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def generate_report(
    stats: AnalysisStats, fmt: str = "console", timestamp: datetime | None = None
) -> str:
    """Render an analysis as text.

    Args:
        stats: Metrics returned by `analyze`.
        fmt: ``"console"`` for a human-readable layout or ``"json"`` for
            ``{"analysis": ..., "timestamp": ...}``.
        timestamp: Time recorded in the JSON report, converted to UTC; defaults
            to now.

    Returns:
        str: The rendered report, without colour codes.

    Raises:
        ValueError: If `fmt` is not a supported format.

    Examples:
        print(generate_report(analyze(text)))
        generate_report(analyze(text), "json")
    """
    if fmt not in REPORT_FORMATS:
        raise ValueError(
            f"Unsupported report format: {fmt} (expected one of {', '.join(REPORT_FORMATS)})"
        )

    if fmt == "json":
        payload = {"analysis": stats.to_dict(), "timestamp": _iso_timestamp(timestamp)}
        return json.dumps(payload, indent=2)

    return _console_report(stats)
