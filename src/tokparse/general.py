"""
General purpose checks to run on a grammar table after `match()`.
"""

from __future__ import annotations
from typing import Sequence
from collections.abc import Iterable

import logging

from pydantic import ValidationError

import tokparse.const as const
from tokparse.const import StatusCode
from tokparse.config import TokenClasses
from tokparse.main import GrammarEntry, Outcome, fits_binding, fits_flag, is_sequence, to_count

log = logging.getLogger(__name__)

# token classes

def classify_tokens(
    table: Sequence[GrammarEntry],
    mandatory: str | Iterable[str] | TokenClasses,
    optional: str | Iterable[str] | None = None,
) -> Outcome:
    """
    Checks the found flags of the table against the mandatory and optional tokens.

    Fails with:
    - `MANDATORY_MISSING`: A mandatory token wasn't found.
    - `INVALID_TOKEN`: A token that's neither mandatory nor optional was found.

    Stops at the first violation. `Outcome.token` is the offending token, and `Outcome.last_grammar_index` its entry.

    `mandatory` and `optional` are space separated strings or iterables of tokens. A `TokenClasses` can be passed as `mandatory` instead, with `optional` left out.
    """
    outcome = Outcome(table=table)
    if not is_sequence(table):
        log.debug("Grammar table is not a sequence: %s", type(table).__name__)
        return outcome.fail(StatusCode.MALFORMED_CALL)

    if isinstance(mandatory, TokenClasses):
        if optional is not None:
            raise ValueError("Optional tokens are part of the given TokenClasses.")
        classes = mandatory
    else:
        try:
            classes = TokenClasses.parse(mandatory, "" if optional is None else optional)
        except ValidationError as e:
            log.debug("Unusable token classes: %s", e)
            return outcome.fail(StatusCode.MALFORMED_CALL)

    for index, entry in enumerate(table):
        outcome.last_grammar_index = index
        token = getattr(entry, "token", None)
        found = getattr(entry, "found", None)
        status = classes.classify(token, fits_flag(found) and bool(found.value))
        if status != StatusCode.OK:
            log.debug("Token %r of grammar entry %d: %s", token, index, status.message)
            outcome.token = token
            return outcome.fail(status)
    return outcome

# whitespace values

def is_blank(value: object) -> bool:
    """Whether the value is a non-empty string made only of whitespace."""
    return isinstance(value, str) and value != "" and all(c in const.WHITESPACES for c in value)

def sanitize_whitespace_values(table: Sequence[GrammarEntry]) -> None:
    """
    Clears every bound value that's made only of whitespace.

    Empty values and values with any other character are left alone. Entries with malformed argument counts, or without a binding that fits their maximum number of values, are skipped.
    """
    if not is_sequence(table):
        return
    for index, entry in enumerate(table):
        max_args = to_count(getattr(entry, "max_args", None))
        arg = getattr(entry, "arg", None)
        if not max_args or not fits_binding(arg, max_args):
            continue
        for slot in range(max_args):
            if is_blank(arg.get(slot)):
                log.debug("Clearing whitespace only value in slot %d of grammar entry %d", slot, index)
                arg.set(slot, "")
