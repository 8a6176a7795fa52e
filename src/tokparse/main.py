"""
The implementations of the main classes, the grammar validator and the matching engine.
"""

from __future__ import annotations
from typing import Any, Self, Final, Protocol, Sequence
from collections.abc import Iterator, Iterable

import logging

import tokparse.const as const
from tokparse.const import StatusCode

log = logging.getLogger(__name__)



class Flag:
    """
    The found flag of a grammar entry.

    Set the moment the entry's token is matched. Truthy when set.
    """
    def __init__(self, value: bool = False) -> None:
        self.value: bool = value

    def set(self, value: bool = True) -> None:
        self.value = value

    def clear(self) -> None:
        self.value = False

    def __bool__(self) -> bool:
        return self.value

    def __repr__(self) -> str:
        return f"<Flag {self.value}>"

class FoundFlag(Protocol):
    """
    Where a grammar entry records that its token was matched.

    `Flag` is the provided implementation. Any object with a `value` attribute and these methods can be used instead.
    """
    value: bool
    def set(self, value: bool = True) -> None: ...
    def clear(self) -> None: ...

class ArgBinding(Protocol):
    """
    Where the values following a matched token are written.

    `Value` and `Values` are the provided implementations. Any object with these methods can be used instead.
    """
    def clear(self, size: int) -> None:
        """Resets the binding to its empty value. `size` is the maximum number of values of the entry."""
        ...
    def set(self, index: int, value: str) -> None: ...
    def get(self, index: int) -> str: ...

class Value:
    """
    Scalar argument binding. For entries that take at most one value.

    ```
    name = Value()
    table = [GrammarEntry("--name", Flag(), 1, 1, name)]
    match(["--name", "foo"], table)
    name.value  # "foo"
    ```
    """
    def __init__(self, value: str = "") -> None:
        self.value: str = value

    def clear(self, size: int = 1) -> None:
        self.value = ""

    def set(self, index: int, value: str) -> None:
        if index != 0:
            raise IndexError(f"Scalar binding has no slot {index}.")
        self.value = value

    def get(self, index: int = 0) -> str:
        if index != 0:
            raise IndexError(f"Scalar binding has no slot {index}.")
        return self.value

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Value):
            return self.value == other.value
        return self.value == other

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"<Value {self.value!r}>"

class Values:
    """
    Sequence argument binding. For entries that take more than one value.

    Cleared to as many empty strings as the entry's maximum number of values, so slots that weren't supplied read as `""`.

    ```
    files = Values()
    table = [GrammarEntry("--files", Flag(), 1, 3, files)]
    match(["--files", "a", "b"], table)
    list(files)  # ["a", "b", ""]
    ```
    """
    def __init__(self, values: Iterable[str] = ()) -> None:
        self.values: list[str] = list(values)

    def clear(self, size: int) -> None:
        self.values = [""] * size

    def set(self, index: int, value: str) -> None:
        if index >= len(self.values):
            self.values.extend([""] * (index + 1 - len(self.values)))
        self.values[index] = value

    def get(self, index: int) -> str:
        if index >= len(self.values):
            return ""
        return self.values[index]

    def supplied(self) -> list[str]:
        """The values up to and including the last non-empty slot."""
        end = len(self.values)
        while end > 0 and self.values[end-1] == "":
            end -= 1
        return self.values[:end]

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def __getitem__(self, index: int) -> str:
        return self.values[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Values):
            return self.values == other.values
        if isinstance(other, (list, tuple)):
            return self.values == list(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"<Values {self.values!r}>"


class GrammarEntry:
    """
    One row of the grammar table.

    ```
    GrammarEntry("--verbose", verbose_flag)                     # no values
    GrammarEntry("--out", out_flag, 1, 1, out_value)            # exactly one value, `Value` binding
    GrammarEntry("--files", files_flag, 1, 3, files_values)     # one to three values, `Values` binding
    ```
    """
    def __init__(
        self,
        token: str,
        found: FoundFlag,
        min_args: int | str = 0,
        max_args: int | str = 0,
        arg: ArgBinding | None = None,
    ) -> None:
        """
        `token`: The literal that introduces the entry.
        `found`: Set when the token is matched.
        `min_args`: The minimum number of values that must follow the token.
        `max_args`: The maximum number of values that may follow the token.
        `arg`: Where the values are written. Required if `max_args` is more than 0.

        Counts can also be given as strings of digits. They're converted to `int` by `validate()`.
        """
        self.token: str = token
        self.found: FoundFlag = found
        self.min_args: int | str = min_args
        self.max_args: int | str = max_args
        self.arg: ArgBinding | None = arg

    @classmethod
    def new(cls, token: str, min_args: int = 0, max_args: int = 0) -> Self:
        """Creates an entry along with fresh bindings that fit its maximum number of values."""
        arg: ArgBinding | None
        if max_args == 0:
            arg = None
        elif max_args == 1:
            arg = Value()
        else:
            arg = Values()
        return cls(token, Flag(), min_args, max_args, arg)

    def __repr__(self) -> str:
        return f"<GrammarEntry {self.token!r} {self.min_args}..{self.max_args}>"

class TokenSet:
    """
    Every token of a grammar table, mapped to the index of the first entry that carries it.

    Built by `validate()`.
    """
    def __init__(self) -> None:
        self._indexes: dict[str, int] = {}

    def add(self, token: str, index: int) -> None:
        """The first index of a token is kept."""
        self._indexes.setdefault(token, index)

    def index(self, token: str) -> int:
        """Raises `KeyError` if the token isn't in the set."""
        return self._indexes[token]

    def __contains__(self, token: object) -> bool:
        return isinstance(token, str) and token in self._indexes

    def __len__(self) -> int:
        return len(self._indexes)

    def __iter__(self) -> Iterator[str]:
        return iter(self._indexes)

    def __repr__(self) -> str:
        return "<TokenSet " + " | ".join(self._indexes) + ">"



class Outcome:
    """
    The result of `validate()`, `match()` and `classify_tokens()`.

    Truthy on success, falsy on failure:
    ```
    outcome = match(args, table)
    if outcome:
        ... # `outcome.tokens_matched` entries were matched
    else:
        print(format_status(outcome))
        raise outcome.error()   # optional
    ```
    """
    def __init__(
        self,
        status: StatusCode = StatusCode.OK,
        *,
        input: Sequence[Any] | None = None,
        table: Sequence[GrammarEntry] | None = None,
    ) -> None:
        self.status: StatusCode = status
        self.tokens_matched: int = 0
        """The number of distinct grammar entries matched."""
        self.last_input_index: int = 0
        """The offending input index on input errors. The length of the input on success."""
        self.last_grammar_index: int = 0
        """The index of the last grammar entry processed. The offending entry on grammar and argument errors."""
        self.last_arg_index: int = -1
        """The slot that couldn't be filled on argument errors. Otherwise the last slot written for the last matched entry."""
        self.token_set: TokenSet | None = None
        """Set by a successful `validate()`."""
        self.token: str | None = None
        """The offending token reported by `classify_tokens()`."""
        self.input: Final[Sequence[Any] | None] = input
        self.table: Final[Sequence[GrammarEntry] | None] = table

    def fail(self, status: StatusCode) -> Self:
        self.status = status
        return self

    @property
    def message(self) -> str:
        """The static message of the status."""
        return self.status.message

    def describe(self) -> str:
        """The positional fragment naming the offending token or entry. See `describe_status()`."""
        return describe_status(self.status, self.input, self.table, self.last_input_index, self.last_grammar_index)

    def error(self) -> TokenParseError:
        """Converts a failed outcome to a `TokenParseError`."""
        if self:
            raise ValueError("Can't create an error from a successful outcome.")
        return TokenParseError(self)

    def __bool__(self) -> bool:
        return self.status == StatusCode.OK

    def __repr__(self) -> str:
        return (
            f"<Outcome {self.status.name} matched={self.tokens_matched}"
            f" input={self.last_input_index} grammar={self.last_grammar_index} arg={self.last_arg_index}>"
        )

class TokenParseError(Exception):
    """
    A failed `Outcome` as an exception. Created by `Outcome.error()`.

    Nothing in this library raises it, it's for callers that would rather raise than check the outcome.
    """
    def __init__(self, outcome: Outcome) -> None:
        super().__init__(format_status(outcome))
        self.outcome: Final[Outcome] = outcome
        self.status: Final[StatusCode] = outcome.status
        if outcome.status in _INPUT_STATUSES:
            self.add_note(f"At input index {outcome.last_input_index}")
        if outcome.status in _ARG_STATUSES:
            self.add_note(f"At argument slot {outcome.last_arg_index}")
        if outcome.status.is_grammar_error or outcome.status in _ENTRY_TOKEN_STATUSES:
            token = getattr(_item_at(outcome.table, outcome.last_grammar_index), "token", None)
            if isinstance(token, str) and token:
                self.add_note(f"At grammar entry {outcome.last_grammar_index} (token \"{token}\")")
            else:
                self.add_note(f"At grammar entry {outcome.last_grammar_index}")


_SILENT_STATUSES: Final[frozenset[StatusCode]] = frozenset({StatusCode.OK, StatusCode.MALFORMED_CALL})
_INPUT_TOKEN_STATUSES: Final[frozenset[StatusCode]] = frozenset({StatusCode.UNKNOWN_TOKEN, StatusCode.TOKEN_ALREADY_SET})
_ARG_STATUSES: Final[frozenset[StatusCode]] = frozenset({StatusCode.MISSING_ARGUMENT, StatusCode.TOKEN_INSTEAD_OF_VALUE})
_INPUT_STATUSES: Final[frozenset[StatusCode]] = _INPUT_TOKEN_STATUSES | _ARG_STATUSES
_ENTRY_TOKEN_STATUSES: Final[frozenset[StatusCode]] = _ARG_STATUSES | {StatusCode.MANDATORY_MISSING, StatusCode.INVALID_TOKEN}

def _item_at(items: object, index: int) -> Any:
    if not is_sequence(items) or not 0 <= index < len(items):
        return None
    return items[index]

def describe_status(
    code: StatusCode | int,
    input: Sequence[Any] | None,
    table: Sequence[GrammarEntry] | None,
    last_input_index: int,
    last_grammar_index: int,
) -> str:
    """
    Returns a fragment naming what the status is about.

    - Grammar table errors: `Element "<index>"`
    - Unknown token, token already set: `Token "<input item>"`
    - Argument and classifier errors: `Token "<grammar entry token>"`

    Returns an empty string for statuses with nothing to point at, or if the index is out of range. Callers supply the static message themselves. (See `StatusCode.message`)
    """
    try:
        status = StatusCode(code)
    except ValueError:
        return "Unknown error"
    if status in _SILENT_STATUSES:
        return ""
    if status.is_grammar_error:
        return f'Element "{last_grammar_index}"'
    if status in _INPUT_TOKEN_STATUSES:
        item = _item_at(input, last_input_index)
        return "" if item is None else f'Token "{item}"'
    token = getattr(_item_at(table, last_grammar_index), "token", None)
    return "" if token is None else f'Token "{token}"'

def format_status(outcome: Outcome) -> str:
    """The static message of the outcome's status, followed by its positional fragment if there's one."""
    fragment = outcome.describe()
    if not fragment:
        return outcome.message
    return f"{outcome.message}: {fragment}"



def is_sequence(value: object) -> bool:
    """Strings don't count."""
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))

def to_count(value: object) -> int | None:
    """
    Converts an argument count to an `int`.

    Accepts non-negative integers and strings of decimal digits. Returns `None` for anything else.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, str) and value and all(c in const.DECIMAL for c in value):
        return int(value)
    return None

def _has_methods(obj: object, *names: str) -> bool:
    return obj is not None and all(callable(getattr(obj, name, None)) for name in names)

def fits_flag(found: object) -> bool:
    """Whether the object can be used as a found flag. (See `FoundFlag`)"""
    return _has_methods(found, "set", "clear") and hasattr(found, "value")

def fits_binding(arg: object, max_args: int) -> bool:
    """Whether the object can be used as the argument binding of an entry taking up to `max_args` values."""
    if not _has_methods(arg, "clear", "set", "get"):
        return False
    if max_args == 1:
        return not isinstance(arg, Values)
    return not isinstance(arg, Value)

def validate(table: Sequence[GrammarEntry]) -> Outcome:
    """
    Checks that the grammar table is well formed, clearing its outputs along the way.

    Stops at the first bad entry. `Outcome.last_grammar_index` points at it.

    On success, `Outcome.token_set` contains every token of the table.
    """
    outcome = Outcome(table=table)
    if not is_sequence(table):
        log.debug("Grammar table is not a sequence: %s", type(table).__name__)
        return outcome.fail(StatusCode.MALFORMED_CALL)

    token_set = TokenSet()
    log.debug("Clearing grammar table outputs")
    for index, entry in enumerate(table):
        outcome.last_grammar_index = index

        token = getattr(entry, "token", None)
        if not isinstance(token, str) or not token:
            log.debug("No token for grammar entry %d", index)
            return outcome.fail(StatusCode.NO_TOKEN)
        token_set.add(token, index)

        found = getattr(entry, "found", None)
        if not fits_flag(found):
            log.debug("No found flag for grammar entry %d", index)
            return outcome.fail(StatusCode.NO_FOUND_FLAG)
        found.clear()

        min_args = to_count(getattr(entry, "min_args", None))
        if min_args is None:
            log.debug("Minimum arguments %r for grammar entry %d is not an integer", getattr(entry, "min_args", None), index)
            return outcome.fail(StatusCode.MIN_ARGS_NOT_INT)
        max_args = to_count(getattr(entry, "max_args", None))
        if max_args is None:
            log.debug("Maximum arguments %r for grammar entry %d is not an integer", getattr(entry, "max_args", None), index)
            return outcome.fail(StatusCode.MAX_ARGS_NOT_INT)
        if min_args > max_args:
            log.debug("Minimum arguments %d greater than maximum arguments %d for grammar entry %d", min_args, max_args, index)
            return outcome.fail(StatusCode.ARGS_RANGE)
        entry.min_args = min_args
        entry.max_args = max_args

        if max_args > 0:
            arg = getattr(entry, "arg", None)
            if not fits_binding(arg, max_args):
                log.debug("No usable argument binding for grammar entry %d", index)
                return outcome.fail(StatusCode.NO_ARG_BINDING)
            arg.clear(max_args)

    outcome.token_set = token_set
    return outcome

def _take_args(
    input: Sequence[Any],
    pos: int,
    entry: GrammarEntry,
    token_set: TokenSet,
    outcome: Outcome,
) -> int | None:
    """
    Binds the values following a matched token, starting at `pos`.

    Returns the position after the last consumed value, or `None` after failing the outcome.
    """
    assert isinstance(entry.min_args, int) and isinstance(entry.max_args, int)
    assert entry.arg is not None
    for slot in range(entry.max_args):
        if pos >= len(input):
            if slot >= entry.min_args:
                log.debug("Out of values for %r, minimum of %d reached", entry.token, entry.min_args)
                break
            log.debug("No value for %r in slot %d", entry.token, slot)
            outcome.last_input_index = pos
            outcome.last_arg_index = slot
            outcome.fail(StatusCode.MISSING_ARGUMENT)
            return None
        value = input[pos]
        if value in token_set:
            if slot >= entry.min_args:
                log.debug("Read token %r after %r, minimum of %d reached", value, entry.token, entry.min_args)
                break
            log.debug("Read token %r instead of value for %r in slot %d", value, entry.token, slot)
            outcome.last_input_index = pos
            outcome.last_arg_index = slot
            outcome.fail(StatusCode.TOKEN_INSTEAD_OF_VALUE)
            return None
        log.debug("Binding %r to slot %d of %r", value, slot, entry.token)
        entry.arg.set(slot, value)
        outcome.last_arg_index = slot
        pos += 1
    return pos

def match(input: Sequence[str], table: Sequence[GrammarEntry]) -> Outcome:
    """
    Validates the grammar table, then matches the input against it in a single pass.

    All found flags and argument bindings of the table are cleared first, whatever their previous state.

    Scanning stops at the first error:
    - `UNKNOWN_TOKEN`: An input item isn't a token of the table.
    - `TOKEN_ALREADY_SET`: A token appears twice.
    - `MISSING_ARGUMENT`: The input ran out before the minimum number of values.
    - `TOKEN_INSTEAD_OF_VALUE`: A token appeared before the minimum number of values.

    Values are taken greedily up to the maximum, but a token always ends the values once the minimum is reached, even if it was meant as a value.
    """
    if not is_sequence(input):
        log.debug("Input is not a sequence: %s", type(input).__name__)
        return Outcome(StatusCode.MALFORMED_CALL, input=input, table=table)

    validated = validate(table)
    outcome = Outcome(validated.status, input=input, table=table)
    outcome.last_grammar_index = validated.last_grammar_index
    if not validated:
        return outcome
    token_set = validated.token_set
    assert token_set is not None
    outcome.token_set = token_set
    outcome.last_grammar_index = 0

    pos = 0
    while pos < len(input):
        item = input[pos]
        outcome.last_input_index = pos
        if item not in token_set:
            log.debug("Unknown token at input index %d: %r", pos, item)
            return outcome.fail(StatusCode.UNKNOWN_TOKEN)

        index = token_set.index(item)
        entry = table[index]
        outcome.last_grammar_index = index
        if entry.found.value:
            log.debug("Token %r already processed", item)
            return outcome.fail(StatusCode.TOKEN_ALREADY_SET)

        log.debug("Token %r found at input index %d", item, pos)
        pos += 1
        outcome.last_arg_index = -1
        if entry.max_args > 0:
            next_pos = _take_args(input, pos, entry, token_set, outcome)
            if next_pos is None:
                return outcome
            pos = next_pos

        entry.found.set(True)
        outcome.tokens_matched += 1

    outcome.last_input_index = len(input)
    return outcome
