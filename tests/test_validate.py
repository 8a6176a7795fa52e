"""Unit tests for grammar table validation."""

import pytest

from tokparse import Flag, GrammarEntry, StatusCode, Value, Values, validate


def test_empty_table_validates_with_empty_token_set() -> None:
    """A table without entries is trivially valid."""
    outcome = validate([])

    assert outcome
    assert outcome.token_set is not None
    assert len(outcome.token_set) == 0


def test_token_set_maps_tokens_to_first_entry() -> None:
    """Duplicate tokens keep the index of the first entry in table order."""
    table = [
        GrammarEntry("-a", Flag()),
        GrammarEntry("-b", Flag(), 1, 1, Value()),
        GrammarEntry("-a", Flag()),
    ]

    outcome = validate(table)

    assert outcome
    assert list(outcome.token_set) == ["-a", "-b"]
    assert outcome.token_set.index("-a") == 0
    assert "-b" in outcome.token_set
    assert "-c" not in outcome.token_set


def test_validation_clears_outputs() -> None:
    """Flags and bindings left over from earlier use are reset."""
    flag = Flag(True)
    value = Value("stale")
    values = Values(["x", "y"])
    table = [
        GrammarEntry("-a", flag, 0, 1, value),
        GrammarEntry("-b", Flag(True), 0, 3, values),
    ]

    assert validate(table)

    assert not flag
    assert value == ""
    assert values == ["", "", ""]


def test_string_counts_are_normalized() -> None:
    """Counts given as digit strings are converted to integers."""
    entry = GrammarEntry("-a", Flag(), "1", "2", Values())

    assert validate([entry])
    assert entry.min_args == 1
    assert entry.max_args == 2


@pytest.mark.parametrize(
    ("entry", "status"),
    [
        (GrammarEntry("", Flag()), StatusCode.NO_TOKEN),
        (GrammarEntry(None, Flag()), StatusCode.NO_TOKEN),  # type: ignore[arg-type]
        (GrammarEntry("-x", None), StatusCode.NO_FOUND_FLAG),  # type: ignore[arg-type]
        (GrammarEntry("-x", Flag(), "one", 1, Value()), StatusCode.MIN_ARGS_NOT_INT),
        (GrammarEntry("-x", Flag(), -1, 1, Value()), StatusCode.MIN_ARGS_NOT_INT),
        (GrammarEntry("-x", Flag(), True, 1, Value()), StatusCode.MIN_ARGS_NOT_INT),
        (GrammarEntry("-x", Flag(), 0, 1.5, Value()), StatusCode.MAX_ARGS_NOT_INT),  # type: ignore[arg-type]
        (GrammarEntry("-x", Flag(), 2, 1, Value()), StatusCode.ARGS_RANGE),
        (GrammarEntry("-x", Flag(), 0, 1), StatusCode.NO_ARG_BINDING),
        (GrammarEntry("-x", Flag(), 0, 1, Values()), StatusCode.NO_ARG_BINDING),
        (GrammarEntry("-x", Flag(), 0, 2, Value()), StatusCode.NO_ARG_BINDING),
    ],
)
def test_structural_errors_identify_entry(entry: GrammarEntry, status: StatusCode) -> None:
    """Each structural error is reported at the offending entry's index."""
    table = [GrammarEntry("-ok", Flag()), entry, GrammarEntry("", Flag())]

    outcome = validate(table)

    assert not outcome
    assert outcome.status == status
    assert outcome.status.is_grammar_error
    assert outcome.last_grammar_index == 1
    assert outcome.token_set is None


def test_first_violation_wins() -> None:
    """Validation stops at the first bad entry."""
    table = [
        GrammarEntry("-a", Flag(), 3, 1, Values()),
        GrammarEntry("", Flag()),
    ]

    outcome = validate(table)

    assert outcome.status == StatusCode.ARGS_RANGE
    assert outcome.last_grammar_index == 0


def test_non_sequence_table_is_malformed_call() -> None:
    """A table that isn't a sequence can't be validated."""
    assert validate(None).status == StatusCode.MALFORMED_CALL  # type: ignore[arg-type]
    assert validate("-a -b").status == StatusCode.MALFORMED_CALL  # type: ignore[arg-type]


def test_custom_binding_objects_are_accepted() -> None:
    """Any object with clear, set and get works as an argument binding."""

    class DictBinding:
        def __init__(self) -> None:
            self.data: dict[int, str] = {0: "stale"}

        def clear(self, size: int) -> None:
            self.data = {}

        def set(self, index: int, value: str) -> None:
            self.data[index] = value

        def get(self, index: int) -> str:
            return self.data.get(index, "")

    binding = DictBinding()

    assert validate([GrammarEntry("-d", Flag(), 0, 2, binding)])
    assert binding.data == {}
