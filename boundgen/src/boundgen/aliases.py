# SPDX-FileCopyrightText: Copyright (c) 2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from collections import deque
import string

from boundgen.errors import (
    AliasPoolExhaustedError,
    ScopeMarkerPoolExhaustedError,
)

TYPE_PARAMETER_ALPHABET = tuple(string.ascii_uppercase)
"""Symbols naming generic type parameters, in allocation order."""

SCOPE_MARKER_ALPHABET = tuple("abcdefg")
"""Symbols naming borrow scopes, in allocation order."""

TYPE_PARAMETERS_START = TYPE_PARAMETER_ALPHABET[0]


class AliasPool:
    """A bounded first-in first-out pool of single-character symbols.

    Symbols are handed out in alphabet order and never returned to the pool,
    so an alias is never reused while the pool is alive.

    Parameters
    ----------
    alphabet: tuple[str, ...]
        The symbols of the pool, in the order they are handed out.
    exhausted_error: type[AliasPoolExhaustedError]
        Raised by `take` when no symbol is left.
    """

    def __init__(
        self,
        alphabet: tuple[str, ...] = TYPE_PARAMETER_ALPHABET,
        exhausted_error: type[AliasPoolExhaustedError] = AliasPoolExhaustedError,
    ):
        self._alphabet = tuple(alphabet)
        self._unused = deque(self._alphabet)
        self._exhausted_error = exhausted_error

    @property
    def capacity(self) -> int:
        return len(self._alphabet)

    @property
    def alphabet(self) -> tuple[str, ...]:
        return self._alphabet

    def is_exhausted(self) -> bool:
        return not self._unused

    def remaining(self) -> int:
        return len(self._unused)

    def peek(self) -> str | None:
        """The symbol `take` would return next, or None when exhausted."""
        if not self._unused:
            return None
        return self._unused[0]

    def take(self) -> str:
        if not self._unused:
            raise self._exhausted_error(self.capacity)
        return self._unused.popleft()

    def predecessor(self, symbol: str) -> str | None:
        """The symbol preceding `symbol` in the alphabet.

        Returns None for the first symbol and for symbols outside the
        alphabet.
        """
        try:
            idx = self._alphabet.index(symbol)
        except ValueError:
            return None
        if idx == 0:
            return None
        return self._alphabet[idx - 1]


def type_parameter_pool() -> AliasPool:
    return AliasPool(TYPE_PARAMETER_ALPHABET, AliasPoolExhaustedError)


def scope_marker_pool() -> AliasPool:
    return AliasPool(SCOPE_MARKER_ALPHABET, ScopeMarkerPoolExhaustedError)
