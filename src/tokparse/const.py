"""
Status codes and other constants.
"""

from __future__ import annotations
from typing import Final

import enum

WHITESPACES: Final[frozenset[str]] = frozenset({" ", "\t", "\n", "\r", "\f"})
DECIMAL: Final[frozenset[str]] = frozenset({"0", "1", "2", "3", "4", "5", "6", "7", "8", "9"})


class StatusCode(enum.IntEnum):
    """
    The closed set of outcomes of every operation.

    Codes 2 to 7 are grammar table errors, and identify the offending entry.
    """
    OK = 0
    MALFORMED_CALL = 1
    NO_TOKEN = 2
    NO_FOUND_FLAG = 3
    NO_ARG_BINDING = 4
    MIN_ARGS_NOT_INT = 5
    MAX_ARGS_NOT_INT = 6
    ARGS_RANGE = 7
    UNKNOWN_TOKEN = 8
    MISSING_ARGUMENT = 9
    TOKEN_ALREADY_SET = 10
    TOKEN_INSTEAD_OF_VALUE = 11
    MANDATORY_MISSING = 12
    INVALID_TOKEN = 13

    @property
    def is_grammar_error(self) -> bool:
        return StatusCode.NO_TOKEN <= self <= StatusCode.ARGS_RANGE

    @property
    def message(self) -> str:
        return STATUS_MESSAGES[self]


STATUS_MESSAGES: Final[dict[StatusCode, str]] = {
    StatusCode.OK: "No error",
    StatusCode.MALFORMED_CALL: "Malformed call",
    StatusCode.NO_TOKEN: "No token for element in grammar table",
    StatusCode.NO_FOUND_FLAG: "No found flag for element in grammar table",
    StatusCode.NO_ARG_BINDING: "No argument binding for element in grammar table",
    StatusCode.MIN_ARGS_NOT_INT: "Minimum arguments for token is not a non-negative integer",
    StatusCode.MAX_ARGS_NOT_INT: "Maximum arguments for token is not a non-negative integer",
    StatusCode.ARGS_RANGE: "Minimum arguments greater than maximum arguments",
    StatusCode.UNKNOWN_TOKEN: "Unknown token",
    StatusCode.MISSING_ARGUMENT: "No argument for token",
    StatusCode.TOKEN_ALREADY_SET: "Token has already been processed",
    StatusCode.TOKEN_INSTEAD_OF_VALUE: "Read next token instead of value for token",
    StatusCode.MANDATORY_MISSING: "Mandatory token missing",
    StatusCode.INVALID_TOKEN: "Invalid token",
}
