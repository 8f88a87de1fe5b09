from __future__ import annotations

import string

from hypothesis import given
from hypothesis import strategies as st

from md_writer.analyzer import analyze
from md_writer.models import DEFAULT_TAG_TABLE, ParsedLine, RecognitionError
from md_writer.translator import generate_markdown, parse_input, parse_line, translate

prefix_strategy = st.sampled_from(DEFAULT_TAG_TABLE.known_prefixes)
content_strategy = st.text(
    alphabet=string.ascii_letters + string.digits + " ()[]#*-_.,!?'", min_size=1, max_size=40
)
word_strategy = st.from_regex(r"[A-Za-z][A-Za-z0-9 ]{0,20}", fullmatch=True)


@given(prefix_strategy, content_strategy)
def test_tagged_line_renders_table_prefix_and_trimmed_content(prefix: str, content: str):
    parsed = parse_line(f"{prefix}({content})")

    assert isinstance(parsed, ParsedLine)
    assert parsed.markdown == f"{DEFAULT_TAG_TABLE[prefix]} {content.strip()}"


@given(st.text(alphabet=string.ascii_letters + string.digits + " .,!?", max_size=40))
def test_lines_without_parentheses_are_never_parsed(line: str):
    outcome = parse_line(line)

    assert outcome is None or isinstance(outcome, RecognitionError)


@given(st.lists(st.tuples(st.booleans(), prefix_strategy, word_strategy), max_size=20))
def test_parse_input_keeps_valid_lines_in_order(entries):
    lines = [
        f"{prefix}({content})" if valid else f"{prefix} {content}"
        for valid, prefix, content in entries
    ]

    parsed = parse_input("\n".join(lines))

    expected = [(prefix, content.strip()) for valid, prefix, content in entries if valid]
    assert [(line.prefix, line.content) for line in parsed] == expected


@given(st.text(max_size=200))
def test_translate_never_raises_and_partitions_lines(text: str):
    result = translate(text)

    non_blank = [line for line in text.splitlines() if line.strip()]
    assert len(result.lines) + len(result.errors) == len(non_blank)


@given(st.lists(st.tuples(prefix_strategy, word_strategy), max_size=20))
def test_translated_headings_are_counted_by_analyzer(entries):
    markdown = generate_markdown(parse_input("\n".join(f"{p}({c})" for p, c in entries)))

    stats = analyze(markdown)

    for level, markdown_prefix in ((1, "#"), (2, "##"), (3, "###")):
        expected = sum(1 for prefix, _ in entries if DEFAULT_TAG_TABLE[prefix] == markdown_prefix)
        assert stats.heading_levels[f"h{level}"] == expected


@given(st.text(max_size=300))
def test_analyze_ratios_are_bounded(content: str):
    stats = analyze(content)

    assert 0 <= stats.plain_text_ratio <= 100
    assert 0 <= stats.formatting_ratio <= 100
    if content:
        assert abs(stats.plain_text_ratio + stats.formatting_ratio - 100) <= 0.11
    else:
        assert stats.plain_text_ratio == stats.formatting_ratio == 0


@given(st.text(max_size=200))
def test_analyze_is_deterministic(content: str):
    assert analyze(content) == analyze(content)
