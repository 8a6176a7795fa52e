"""
Token class configuration, validated with pydantic.
"""

from __future__ import annotations
from typing import Any
from collections.abc import Iterable

from pydantic import BaseModel, Field, field_validator

from tokparse.const import StatusCode


class TokenClasses(BaseModel):
    """
    Which tokens of a grammar table must be found (`mandatory`) and which may be found (`optional`).

    Any other token is invalid if found.

    Both sets accept a space separated string or an iterable of tokens:
    ```
    TokenClasses(mandatory="--in --out", optional=["--verbose"])
    ```
    Runs of whitespace are collapsed and an empty string is the empty set. Frozen once created.
    """

    mandatory: frozenset[str] = Field(default_factory=frozenset)
    optional: frozenset[str] = Field(default_factory=frozenset)

    model_config = {"extra": "forbid", "frozen": True}

    @field_validator("mandatory", "optional", mode="before")
    @classmethod
    def split_token_string(cls, value: Any) -> Any:
        if value is None:
            return frozenset()
        if isinstance(value, str):
            return frozenset(value.split())
        return value

    @classmethod
    def parse(
        cls,
        mandatory: str | Iterable[str] = "",
        optional: str | Iterable[str] = "",
    ) -> TokenClasses:
        """Raises `pydantic.ValidationError` if either list holds anything but strings."""
        return cls(mandatory=mandatory, optional=optional)

    def classify(self, token: str | None, found: bool) -> StatusCode:
        """
        The status of a single grammar entry's token.

        `MANDATORY_MISSING` if it's mandatory and wasn't found, `INVALID_TOKEN` if it was found but is in neither set, `OK` otherwise.
        """
        if not found:
            if token in self.mandatory:
                return StatusCode.MANDATORY_MISSING
            return StatusCode.OK
        if token in self.mandatory or token in self.optional:
            return StatusCode.OK
        return StatusCode.INVALID_TOKEN
