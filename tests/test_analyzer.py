from __future__ import annotations

import json
import textwrap
from datetime import datetime, timedelta, timezone

import pytest

from md_writer.analyzer import (
    analyze,
    average_words_per_paragraph,
    count_formatting_characters,
    count_paragraphs,
    count_words,
    generate_report,
)
from md_writer.models import AnalysisStats
from md_writer.translator import generate_markdown, parse_input


def _doc(text: str) -> str:
    return textwrap.dedent(text).lstrip()


def test_analyze_basic_document():
    stats = analyze("# A\n\nText\n\n- item\n")

    assert stats.paragraph_count == 3
    assert stats.heading_levels["h1"] == 1
    assert stats.list_item_count == 1
    assert stats.word_count == 3
    assert stats.formatting_ratio == 11.1
    assert stats.plain_text_ratio == 88.9


def test_analyze_empty_content_has_zero_ratios():
    stats = analyze("")

    assert stats.plain_text_ratio == 0
    assert stats.formatting_ratio == 0
    assert stats.word_count == 0
    assert stats.paragraph_count == 0
    assert stats.total_headings == 0


def test_analyze_whitespace_only_content():
    stats = analyze("   \n  ")

    assert stats.word_count == 0
    assert stats.paragraph_count == 0
    assert stats.plain_text_ratio == 100.0
    assert stats.formatting_ratio == 0.0


def test_ratio_halves_round_up():
    # One formatting character out of 80 is exactly 1.25%.
    assert analyze("#" + "a" * 79).formatting_ratio == 1.3
    # One out of 400 is exactly 0.25%.
    assert analyze("#" + "a" * 399).formatting_ratio == 0.3


def test_analyze_counts_fence_lines():
    stats = analyze(
        _doc(
            """
            Intro

            ```python
            print('x')
            ```
            """
        )
    )

    assert stats.code_block_count == 2


def test_analyze_heading_levels():
    stats = analyze(
        _doc(
            """
            # One
            ## Two
            ## Two again
            ###### Six
            ####### Seven is not a heading
            #NoSpace
            """
        )
    )

    assert dict(stats.heading_levels) == {"h1": 1, "h2": 2, "h3": 0, "h4": 0, "h5": 0, "h6": 1}
    assert stats.total_headings == 4


def test_analyze_list_items():
    stats = analyze(
        _doc(
            """
            - dash
            * star
            + plus
            1. first
            10. tenth
            -no space
            1.no space
            """
        )
    )

    assert stats.list_item_count == 5


def test_analyze_quotes_do_not_need_a_space():
    stats = analyze("> spaced\n>tight\nnot > quote\n")

    assert stats.quote_count == 2


def test_analyze_indented_lines_are_trimmed():
    stats = analyze("   ## Indented\n   - item\n")

    assert stats.heading_levels["h2"] == 1
    assert stats.list_item_count == 1


def test_analyze_images_are_counted_as_links_too():
    stats = analyze("See [docs](http://example.com) and ![logo](logo.png) here\n")

    assert stats.link_count == 2
    assert stats.image_count == 1


def test_analyze_counts_multiple_links_per_line():
    stats = analyze("[a](1) [b](2) [c](3)")

    assert stats.link_count == 3
    assert stats.image_count == 0


def test_analyze_resets_between_calls():
    content = "# Title\n\nSome words here\n"

    first = analyze(content)
    second = analyze(content)

    assert first == second
    assert second.word_count == 4


def test_analyze_returns_frozen_snapshot():
    stats = analyze("# Title")

    with pytest.raises(AttributeError):
        stats.word_count = 10
    with pytest.raises(TypeError):
        stats.heading_levels["h1"] = 5


def test_round_trip_heading_counts_match_tags():
    text = "Title1(A)\nAAA(B)\nBBB(C)\nTitle2(D)\nCCC(E)\nDDD(F)\nEEE(G)\nList(H)"

    stats = analyze(generate_markdown(parse_input(text)))

    assert stats.heading_levels["h1"] == 2
    assert stats.heading_levels["h2"] == 2
    assert stats.heading_levels["h3"] == 1
    assert stats.list_item_count == 2
    assert stats.quote_count == 1


def test_count_words_strips_markdown_punctuation():
    assert count_words("## Hello *world*") == 2
    assert count_words("[link](target)") == 1
    assert count_words("- [link] (target)") == 2
    assert count_words("---") == 0


def test_count_formatting_characters():
    assert count_formatting_characters("# _a_ ~b~ [c](d) `e` > -") == 13


def test_count_paragraphs_ignores_blank_runs():
    assert count_paragraphs("one\n\n\n  \ntwo\nstill two\n\n") == 2


def test_average_words_per_paragraph_zero_guard():
    assert average_words_per_paragraph(AnalysisStats()) == "0"
    assert average_words_per_paragraph(AnalysisStats(word_count=7, paragraph_count=2)) == "3.5"


def test_console_report_sections_in_order():
    report = generate_report(analyze("# Title\n\nBody text\n\n## Part\n"))

    titles = [
        "Content Overview:",
        "Structure Analysis:",
        "Links & Media:",
        "Content Analysis:",
    ]
    positions = [report.index(title) for title in titles]
    assert positions == sorted(positions)
    metrics = [
        "Word Count:",
        "Paragraphs:",
        "List Items:",
        "Quote Lines:",
        "Total Headings:",
        "Links:",
        "Images:",
        "Code Blocks:",
        "Plain Text:",
        "Formatting:",
        "Avg Words/Paragraph:",
    ]
    positions = [report.index(metric) for metric in metrics]
    assert positions == sorted(positions)


def test_console_report_shows_only_non_zero_heading_levels():
    report = generate_report(analyze("# Title\n### Sub\n"))

    assert "H1 Headings: 1" in report
    assert "H3 Headings: 1" in report
    assert "H2 Headings" not in report
    assert "Total Headings: 2" in report


def test_console_report_for_empty_content():
    report = generate_report(analyze(""))

    assert "Avg Words/Paragraph: 0" in report
    assert "Plain Text: 0.0%" in report
    assert "Formatting: 0.0%" in report


def test_json_report_structure():
    stats = analyze("# A\n\nText\n\n- item\n")
    moment = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

    payload = json.loads(generate_report(stats, "json", timestamp=moment))

    assert payload["timestamp"] == "2024-01-02T03:04:05.000Z"
    assert payload["analysis"] == {
        "wordCount": 3,
        "paragraphCount": 3,
        "headingLevels": {"h1": 1, "h2": 0, "h3": 0, "h4": 0, "h5": 0, "h6": 0},
        "linkCount": 0,
        "imageCount": 0,
        "listItemCount": 1,
        "quoteCount": 0,
        "codeBlockCount": 0,
        "plainTextRatio": 88.9,
        "formattingRatio": 11.1,
    }


def test_json_report_defaults_to_current_time():
    payload = json.loads(generate_report(analyze("text"), "json"))

    assert payload["timestamp"].endswith("Z")
    datetime.fromisoformat(payload["timestamp"].replace("Z", "+00:00"))


def test_json_report_converts_timestamps_to_utc():
    stats = analyze("text")
    naive = datetime(2024, 1, 2, 3, 4, 5)
    offset = datetime(2024, 1, 2, 5, 4, 5, tzinfo=timezone(timedelta(hours=2)))

    naive_stamp = json.loads(generate_report(stats, "json", timestamp=naive))["timestamp"]
    offset_stamp = json.loads(generate_report(stats, "json", timestamp=offset))["timestamp"]

    assert offset_stamp == "2024-01-02T03:04:05.000Z"
    assert naive_stamp.endswith("Z")
    assert datetime.fromisoformat(naive_stamp.replace("Z", "+00:00")) == naive.astimezone(
        timezone.utc
    )


def test_generate_report_rejects_unknown_format():
    with pytest.raises(ValueError, match="Unsupported report format"):
        generate_report(analyze("text"), "html")
