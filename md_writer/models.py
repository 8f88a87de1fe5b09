"""Data models for md-writer."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum, auto
from types import MappingProxyType

from .constants import DEFAULT_TAGS, HEADING_LEVELS, PREFIX_PATTERN


class TagTable(Mapping):
    """Frozen mapping from custom-syntax prefixes to Markdown block prefixes.

    Lookups are case-sensitive exact matches. Several prefixes may share a
    Markdown prefix; aliases are not distinguished anywhere else.

    Args:
        entries: Prefix to Markdown prefix pairs.

    Raises:
        ValueError: If a prefix is not alphanumeric or a Markdown prefix is
            empty.

    Examples:
        TagTable({"AAA": "#", "Title1": "#"})
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[str, str]):
        for prefix, markdown in entries.items():
            if not isinstance(prefix, str) or not PREFIX_PATTERN.fullmatch(prefix):
                raise ValueError(f"Invalid tag prefix: {prefix!r} (expected letters and digits)")
            if not isinstance(markdown, str) or not markdown.strip():
                raise ValueError(f"Tag {prefix!r} must map to a non-empty Markdown prefix")
        self._entries = MappingProxyType(dict(entries))

    def __getitem__(self, prefix: str) -> str:
        return self._entries[prefix]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"TagTable({dict(self._entries)!r})"

    @property
    def known_prefixes(self) -> tuple[str, ...]:
        return tuple(self._entries)

    def extend(self, aliases: Mapping[str, str]) -> TagTable:
        """Return a new table with `aliases` added (or overriding entries)."""
        if not aliases:
            return self
        return TagTable({**self._entries, **aliases})


DEFAULT_TAG_TABLE = TagTable(DEFAULT_TAGS)


class ErrorKind(Enum):
    """Reasons a line of custom syntax was not recognised.

    Attributes:
        MALFORMED_LINE: The line does not have the ``PREFIX(content)`` shape.
        UNKNOWN_PREFIX: The shape matches but the prefix is not in the table.
    """

    MALFORMED_LINE = auto()
    UNKNOWN_PREFIX = auto()


@dataclass(frozen=True)
class ParsedLine:
    """A recognised line of custom syntax.

    Attributes:
        prefix: Tag that matched, for example ``"AAA"``.
        content: Text between the parentheses, trimmed.
        markdown: Rendered Markdown fragment, for example ``"# Title"``.
    """

    prefix: str
    content: str
    markdown: str


@dataclass(frozen=True)
class RecognitionError:
    """Diagnostic for a line that could not be translated.

    Attributes:
        kind: Why the line was rejected.
        text: The trimmed offending line.
        prefix: The unknown prefix, for `ErrorKind.UNKNOWN_PREFIX` only.
        known_prefixes: Prefixes the table accepts, for help output.
        line_number: One-based line number when produced by a multi-line parse.
    """

    kind: ErrorKind
    text: str
    prefix: str | None = None
    known_prefixes: tuple[str, ...] = ()
    line_number: int | None = None


@dataclass
class TranslationResult:
    """Lines recognised in a block of input plus diagnostics for the rest."""

    lines: list[ParsedLine] = field(default_factory=list)
    errors: list[RecognitionError] = field(default_factory=list)


def _empty_heading_levels() -> dict[str, int]:
    return {level: 0 for level in HEADING_LEVELS}


@dataclass
class StatsAccumulator:
    """Mutable counters filled while scanning one Markdown document."""

    word_count: int = 0
    heading_levels: dict[str, int] = field(default_factory=_empty_heading_levels)
    link_count: int = 0
    image_count: int = 0
    list_item_count: int = 0
    quote_count: int = 0
    code_block_count: int = 0
    formatting_characters: int = 0

    def snapshot(
        self, paragraph_count: int, plain_text_ratio: float, formatting_ratio: float
    ) -> AnalysisStats:
        return AnalysisStats(
            word_count=self.word_count,
            paragraph_count=paragraph_count,
            heading_levels=MappingProxyType(dict(self.heading_levels)),
            link_count=self.link_count,
            image_count=self.image_count,
            list_item_count=self.list_item_count,
            quote_count=self.quote_count,
            code_block_count=self.code_block_count,
            plain_text_ratio=plain_text_ratio,
            formatting_ratio=formatting_ratio,
        )


@dataclass(frozen=True)
class AnalysisStats:
    """Structural and content metrics of a Markdown document.

    Attributes:
        word_count: Words left after stripping Markdown punctuation.
        paragraph_count: Blocks separated by blank lines.
        heading_levels: Heading counts keyed ``"h1"`` to ``"h6"``.
        link_count: ``[label](url)`` matches, images included.
        image_count: ``![label](url)`` matches.
        list_item_count: Ordered and unordered list item lines.
        quote_count: Lines starting with ``>``.
        code_block_count: Fence lines (an open and close fence count as 2).
        plain_text_ratio: Percentage of characters that are not formatting.
        formatting_ratio: Percentage of characters that are formatting.
    """

    word_count: int = 0
    paragraph_count: int = 0
    heading_levels: Mapping[str, int] = field(
        default_factory=lambda: MappingProxyType(_empty_heading_levels())
    )
    link_count: int = 0
    image_count: int = 0
    list_item_count: int = 0
    quote_count: int = 0
    code_block_count: int = 0
    plain_text_ratio: float = 0.0
    formatting_ratio: float = 0.0

    @property
    def total_headings(self) -> int:
        return sum(self.heading_levels.values())

    def to_dict(self) -> dict[str, object]:
        """Return the stats keyed by their report field names."""
        return {
            "wordCount": self.word_count,
            "paragraphCount": self.paragraph_count,
            "headingLevels": {level: self.heading_levels[level] for level in HEADING_LEVELS},
            "linkCount": self.link_count,
            "imageCount": self.image_count,
            "listItemCount": self.list_item_count,
            "quoteCount": self.quote_count,
            "codeBlockCount": self.code_block_count,
            "plainTextRatio": self.plain_text_ratio,
            "formattingRatio": self.formatting_ratio,
        }
