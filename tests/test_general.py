"""Unit tests for the token classifier and the whitespace value sanitizer."""

import pytest

from tokparse import (
    Flag,
    GrammarEntry,
    StatusCode,
    TokenClasses,
    Value,
    Values,
    classify_tokens,
    match,
    sanitize_whitespace_values,
)


@pytest.fixture
def table() -> list[GrammarEntry]:
    """A grammar with three switches."""
    return [
        GrammarEntry("--x", Flag()),
        GrammarEntry("--y", Flag()),
        GrammarEntry("--z", Flag()),
    ]


def test_mandatory_missing(table: list[GrammarEntry]) -> None:
    """An unfound mandatory token is reported by name."""
    outcome = classify_tokens(table, "--x", "")

    assert outcome.status == StatusCode.MANDATORY_MISSING
    assert outcome.token == "--x"
    assert outcome.last_grammar_index == 0


def test_invalid_token_found(table: list[GrammarEntry]) -> None:
    """A found token outside both classes is invalid."""
    assert match(["--x", "--z"], table)

    outcome = classify_tokens(table, "--x", "--y")

    assert outcome.status == StatusCode.INVALID_TOKEN
    assert outcome.token == "--z"
    assert outcome.last_grammar_index == 2


def test_all_tokens_accounted_for(table: list[GrammarEntry]) -> None:
    """Unfound optional and unclassified tokens are fine."""
    assert match(["--x", "--y"], table)

    outcome = classify_tokens(table, "  --x  ", " --y\t--z ")

    assert outcome
    assert outcome.token is None


def test_first_violation_in_table_order(table: list[GrammarEntry]) -> None:
    """Violations are checked entry by entry, stopping at the first one."""
    assert match(["--x"], table)

    outcome = classify_tokens(table, "--y --z", "")

    assert outcome.status == StatusCode.INVALID_TOKEN
    assert outcome.token == "--x"


def test_token_lists_and_token_classes(table: list[GrammarEntry]) -> None:
    """Classes can be given as iterables or as a TokenClasses model."""
    assert match(["--y"], table)

    assert classify_tokens(table, ["--y"], ("--x",))
    classes = TokenClasses(mandatory="--z", optional="--y")
    outcome = classify_tokens(table, classes)
    assert outcome.status == StatusCode.MANDATORY_MISSING
    assert outcome.token == "--z"


def test_token_classes_with_separate_optional_set(table: list[GrammarEntry]) -> None:
    """Optional tokens can't be passed twice."""
    with pytest.raises(ValueError):
        classify_tokens(table, TokenClasses(), "--x")


def test_unusable_classes_are_malformed_call(table: list[GrammarEntry]) -> None:
    """Token lists holding non-strings can't be classified."""
    outcome = classify_tokens(table, [1, 2], "")  # type: ignore[list-item]

    assert outcome.status == StatusCode.MALFORMED_CALL
    assert classify_tokens(None, "", "").status == StatusCode.MALFORMED_CALL  # type: ignore[arg-type]


def test_sanitize_scalar_values() -> None:
    """Whitespace only values are cleared, others are kept."""
    blank, spaced, empty = Value("   "), Value("a b"), Value("")
    table = [
        GrammarEntry("-a", Flag(), 0, 1, blank),
        GrammarEntry("-b", Flag(), 0, 1, spaced),
        GrammarEntry("-c", Flag(), 0, 1, empty),
    ]

    sanitize_whitespace_values(table)

    assert blank == ""
    assert spaced == "a b"
    assert empty == ""


def test_sanitize_sequence_values() -> None:
    """Every slot of a sequence binding is checked."""
    values = Values([" ", "x", "\t\n", ""])
    table = [GrammarEntry("-l", Flag(), 0, 4, values)]

    sanitize_whitespace_values(table)

    assert values == ["", "x", "", ""]


def test_sanitize_after_match() -> None:
    """Blank values bound by matching are cleared."""
    name, files = Value(), Values()
    table = [
        GrammarEntry("--name", Flag(), 1, 1, name),
        GrammarEntry("--files", Flag(), 1, 3, files),
    ]
    assert match(["--name", "  ", "--files", "a", " ", "c"], table)

    sanitize_whitespace_values(table)

    assert name == ""
    assert files == ["a", "", "c"]


def test_sanitize_skips_entries_without_values() -> None:
    """Switches and malformed entries are left alone."""
    table = [
        GrammarEntry("-s", Flag()),
        GrammarEntry("-m", Flag(), 0, "many", Value(" ")),
    ]

    sanitize_whitespace_values(table)

    assert table[1].arg == " "


def test_sanitize_skips_bindings_that_dont_fit() -> None:
    """Entries whose binding can't hold their values are left untouched."""
    scalar = Value(" ")
    table = [
        GrammarEntry("-a", Flag(), 0, 2, scalar),
        GrammarEntry("-b", Flag(), 0, 1, "not a binding"),  # type: ignore[arg-type]
        GrammarEntry("-c", Flag(), 0, 1, Value("\t")),
    ]

    sanitize_whitespace_values(table)

    assert scalar == " "
    assert table[2].arg == ""
