"""Constants used across the md-writer package."""

from __future__ import annotations

import re

# Custom syntax
PREFIX_PATTERN = re.compile(r"[A-Za-z0-9]+")
TAGGED_LINE_PATTERN = re.compile(r"^([A-Za-z0-9]+)\((.+)\)$")
EXPECTED_FORMAT = "PREFIX(Your Content)"

# Both naming schemes resolve to the same Markdown prefixes.
DEFAULT_TAGS = {
    "Title1": "#",
    "Title2": "##",
    "Title3": "###",
    "List": "-",
    "Quote": ">",
    "AAA": "#",
    "BBB": "##",
    "CCC": "###",
    "DDD": "-",
    "EEE": ">",
}

BLOCK_LABELS = {
    "#": "Heading 1",
    "##": "Heading 2",
    "###": "Heading 3",
    "-": "List item",
    ">": "Quote",
}

EXAMPLE_INPUT = (
    "BBB(Health Tips)\nDDD(Less Sugar)\nDDD(More Veggies)\nEEE(Remember to stay hydrated!)"
)

# Markdown analysis patterns
WORD_STRIP_PATTERN = re.compile(r"[#*`>\-\[\]()]")
HEADING_PATTERN = re.compile(r"^(#{1,6})\s")
UNORDERED_LIST_PATTERN = re.compile(r"^[-*+]\s")
ORDERED_LIST_PATTERN = re.compile(r"^\d+\.\s")
CODE_FENCE = "```"
QUOTE_MARKER = ">"
LINK_PATTERN = re.compile(r"\[[^\]]*\]\([^)]*\)")
IMAGE_PATTERN = re.compile(r"!\[[^\]]*\]\([^)]*\)")
FORMATTING_CHARACTERS = frozenset("#*`>-_~[]()")
PARAGRAPH_SEPARATOR_PATTERN = re.compile(r"\n\s*\n")
HEADING_LEVELS = tuple(f"h{level}" for level in range(1, 7))

REPORT_FORMATS = ("console", "json")

# Files
MARKDOWN_EXTENSIONS = (".md", ".markdown")
DEFAULT_OUTPUT_FILENAME = "output.md"
STATS_REPORT_SUFFIX = "-stats.json"
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024
DEFAULT_PREVIEW_LINES = 20

# AI provider bridge
PROVIDERS = ("openrouter", "ollama")
OPENROUTER_API_URL = "https://openrouter.ai/api/v1/chat/completions"
OPENROUTER_PROMPT_LIMIT = 8000
OLLAMA_PROMPT_LIMIT = 16000
