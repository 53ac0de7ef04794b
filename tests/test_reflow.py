import random

import pytest

from legal_lines.models import CandidateLine
from legal_lines.reflow import (
    MERGE_GUARDS,
    ends_with_hyphen,
    is_complete_section_reference,
    merge_wrapped_lines,
    should_merge,
)
from legal_lines.rules import DEFAULT_RULES, ReflowRules


def _lines(*items):
    """Build candidates from (text, page) pairs."""
    return [CandidateLine(text=text, page_number=page, provisional_index=i) for i, (text, page) in enumerate(items)]


def test_hyphenated_wrap_joins_without_space_and_drops_hyphen():
    merged = merge_wrapped_lines(_lines(("self-governing-", 1), ("ment shall continue", 1)))

    assert [line.text for line in merged] == ["self-governingment shall continue"]


def test_terminal_punctuation_blocks_merge_before_section_heading():
    merged = merge_wrapped_lines(_lines(("purpose of this Act.", 1), ("SEC. 2. DEFINITIONS.", 1)))

    assert [line.text for line in merged] == ["purpose of this Act.", "SEC. 2. DEFINITIONS."]


def test_trailing_function_word_merges():
    merged = merge_wrapped_lines(_lines(("the parties agree to the", 1), ("terms set forth below", 1)))

    assert [line.text for line in merged] == ["the parties agree to the terms set forth below"]


def test_continuation_word_merges_even_before_capitalised_line():
    assert should_merge("Subject to the", "Secretary's approval")
    assert should_merge("as determined by the Director of", "Central Intelligence")


def test_lowercase_continuation_requires_unpunctuated_line():
    assert should_merge("This Act may be", "cited as the Test Act.")
    assert not should_merge("the Secretary,", "acting through the Administrator")


@pytest.mark.parametrize(
    "following",
    [
        "SEC. 3. APPROPRIATIONS.",
        "Sec. 3. Appropriations.",
        "SECTION 101 of title 5",
        "TITLE II—MISCELLANEOUS",
        "2. Definitions",
        "B. Reports",
        "IV. Authorities",
        "• an item",
        "– a dash item",
        "- a hyphen item",
        "(1) in general",
        "a) the first clause",
    ],
)
def test_structural_markers_block_merge(following):
    assert not should_merge("funds made available for the", following)


def test_heading_line_blocks_continuation_word_rule():
    assert not should_merge("funds made available for the", "DEPARTMENT OF DEFENSE")


def test_short_or_numeric_uppercase_lines_are_not_headings():
    assert should_merge("administered by the", "NASA")
    assert should_merge("in the fiscal year of", "2023 FUNDS")


def test_hyphen_rule_does_not_override_structural_marker():
    assert not should_merge("well-", "(1) in general")


def test_section_reference_guard():
    rules = DEFAULT_RULES.reflow
    assert is_complete_section_reference("as provided in section 5.", "x", rules) is False
    assert is_complete_section_reference("as provided in section 5", "x", rules) is None
    assert ends_with_hyphen("self-", "x", rules) is True


def test_no_opinion_means_no_merge():
    assert not should_merge("Definitions", "Reports")


def test_never_merges_across_pages():
    merged = merge_wrapped_lines(_lines(("self-governing-", 1), ("ment shall continue", 2)))

    assert [(line.text, line.page_number) for line in merged] == [
        ("self-governing-", 1),
        ("ment shall continue", 2),
    ]


def test_no_cross_page_merge_on_random_input():
    rng = random.Random(1234)
    for _ in range(50):
        pages = sorted(rng.randint(1, 4) for _ in range(30))
        candidates = _lines(*[(f"p{page}w{i} of", page) for i, page in enumerate(pages)])

        for line in merge_wrapped_lines(candidates):
            words = [word for word in line.text.split() if word.startswith("p")]
            assert all(word.startswith(f"p{line.page_number}w") for word in words)


def test_merged_line_keeps_first_page_and_chains_stop_after_two():
    merged = merge_wrapped_lines(
        _lines(
            ("This Act may be", 2),
            ("cited as the", 2),
            ("Test Act", 2),
        )
    )

    assert [(line.text, line.page_number) for line in merged] == [
        ("This Act may be cited as the", 2),
        ("Test Act", 2),
    ]


def test_last_line_is_emitted_unchanged():
    merged = merge_wrapped_lines(_lines(("Done.", 1), ("dangling words of", 1)))

    assert [line.text for line in merged] == ["Done.", "dangling words of"]
    assert merge_wrapped_lines([]) == []


def test_custom_rules_and_guards():
    rules = ReflowRules(continuation_words=("under",))
    assert should_merge("amounts authorized under", "Federal law", rules)
    assert not should_merge("amounts authorized for the", "Federal law", rules)

    assert not should_merge("This Act may be", "cited as", guards=MERGE_GUARDS[:5])
