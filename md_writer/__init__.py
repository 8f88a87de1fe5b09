"""
md-writer: custom syntax to Markdown converter and Markdown statistics.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    md-writer convert notes.txt --save
    md-writer stats README.md --format json

Library Usage:
    from md_writer import analyze, generate_markdown, generate_report, parse_input

    lines = parse_input("AAA(Title)\\nDDD(First item)")
    markdown = generate_markdown(lines)
    print(generate_report(analyze(markdown)))
"""

from .analyzer import analyze, generate_report
from .models import (
    DEFAULT_TAG_TABLE,
    AnalysisStats,
    ErrorKind,
    ParsedLine,
    RecognitionError,
    TagTable,
    TranslationResult,
)
from .translator import (
    describe_error,
    generate_markdown,
    parse_input,
    parse_line,
    suggest_filename,
    translate,
)

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "parse_line",
    "parse_input",
    "translate",
    "generate_markdown",
    "suggest_filename",
    "describe_error",
    "analyze",
    "generate_report",
    # Data models
    "TagTable",
    "DEFAULT_TAG_TABLE",
    "ParsedLine",
    "RecognitionError",
    "ErrorKind",
    "TranslationResult",
    "AnalysisStats",
    # Version
    "__version__",
]
