# SPDX-FileCopyrightText: Copyright (c) 2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from boundgen.aliases import (
    AliasPool,
    TYPE_PARAMETERS_START,
    scope_marker_pool,
    type_parameter_pool,
)

DEFAULT_UPCAST_IMPORT = "glib::object::IsA"
"""Import providing the generic instance-of capability."""


class BoundKindTag(str, Enum):
    """
    The closed set of constraints a generic parameter can carry.

    Notes
    -----
    - `no_wrapper`: a slot is reserved but the parameter is passed as is.
    - `upcast`: the parameter accepts any subtype-compatible value.
    - `reference`: the parameter accepts any reference-convertible value.
    """

    no_wrapper = "no_wrapper"
    upcast = "upcast"
    reference = "reference"


@dataclass(frozen=True)
class BoundKind:
    tag: BoundKindTag
    scope_marker: str | None = None

    @classmethod
    def no_wrapper(cls) -> "BoundKind":
        return cls(BoundKindTag.no_wrapper)

    @classmethod
    def upcast(cls, scope_marker: str | None = None) -> "BoundKind":
        return cls(BoundKindTag.upcast, scope_marker)

    @classmethod
    def reference(cls, scope_marker: str | None = None) -> "BoundKind":
        return cls(BoundKindTag.reference, scope_marker)

    def need_upcast(self) -> bool:
        return self.tag is BoundKindTag.upcast

    def needs_marshal_call(self) -> bool:
        return self.tag is not BoundKindTag.no_wrapper

    def __str__(self):
        if self.scope_marker is None:
            return self.tag.value
        return f"{self.tag.value}({self.scope_marker})"


@dataclass
class Bound:
    kind: BoundKind
    parameter_name: str
    alias: str
    rendered_type: str
    forwards_scope_to_next: bool = False
    callback_modified: bool = False


@dataclass(frozen=True)
class CallbackInfo:
    """A synthesized callback signature bound to one generic parameter.

    For completion callbacks of asynchronous functions the success and error
    texts describe the result the callback receives. Plain callbacks carry
    empty success and error texts.
    """

    callback_type_text: str
    success_type_text: str
    error_type_text: str
    bound_alias: str


class BoundAllocator:
    """Registry of the generic parameters of one function signature.

    Aliases come from a 26-symbol pool and are assigned in registration
    order. An allocator is created per analyzed function and discarded once
    the signature is emitted.
    """

    def __init__(self):
        self._aliases: AliasPool = type_parameter_pool()
        self._committed: list[Bound] = []
        self._scope_markers: AliasPool = scope_marker_pool()
        self._consumed_scope_markers: list[str] = []

    def next_alias(self) -> str | None:
        """The alias the next successful registration receives."""
        return self._aliases.peek()

    def register(
        self,
        name: str,
        rendered_type: str,
        kind: BoundKind,
        is_async_marker: bool = False,
    ) -> bool:
        """Commit a bound for parameter `name`.

        The completion `callback` of an asynchronous function always gets a
        `no_wrapper` slot, whatever `kind` is requested, and skips the
        duplicate check.

        Returns
        -------
        registered: bool
            False when `name` is already bound or the alias pool is
            exhausted. The allocator is left untouched in that case.
        """
        if is_async_marker and name == "callback":
            if self._aliases.is_exhausted():
                return False
            self._commit(name, rendered_type, BoundKind.no_wrapper())
            return True

        if any(b.parameter_name == name for b in self._committed):
            return False
        if self._aliases.is_exhausted():
            return False
        self._commit(name, rendered_type, kind)
        return True

    def _commit(self, name: str, rendered_type: str, kind: BoundKind):
        self._committed.append(
            Bound(
                kind=kind,
                parameter_name=name,
                alias=self._aliases.take(),
                rendered_type=rendered_type,
            )
        )

    def lookup_by_name(self, name: str) -> tuple[str, BoundKind] | None:
        for bound in self._committed:
            if bound.parameter_name == name and not bound.forwards_scope_to_next:
                return bound.alias, bound.kind
        return None

    def base_scope_marker(self, alias: str) -> str | None:
        """The alias whose scope flows into `alias`, if any.

        Only the alphabet-adjacent predecessor is considered, and only when
        its bound forwards its scope to the next parameter.
        """
        if alias == TYPE_PARAMETERS_START:
            return None
        prev_alias = self._aliases.predecessor(alias)
        if prev_alias is None:
            return None
        for bound in self._committed:
            if bound.alias == prev_alias:
                return bound.alias if bound.forwards_scope_to_next else None
        return None

    def forward_scope(self, name: str) -> str:
        """Link the scope of bound `name` to the bound allocated after it.

        Consumes one scope marker and returns it.

        Raises
        ------
        KeyError
            If `name` has no committed bound.
        ScopeMarkerPoolExhaustedError
            If all scope markers are in use.
        """
        for bound in self._committed:
            if bound.parameter_name == name:
                break
        else:
            raise KeyError(name)

        marker = self._scope_markers.take()
        self._consumed_scope_markers.append(marker)
        bound.forwards_scope_to_next = True
        return marker

    def required_imports(
        self, upcast_import: str = DEFAULT_UPCAST_IMPORT
    ) -> set[str]:
        imports: set[str] = set()
        for bound in self._committed:
            if bound.kind.tag is BoundKindTag.no_wrapper:
                continue
            elif bound.kind.tag is BoundKindTag.upcast:
                imports.add(upcast_import)
            elif bound.kind.tag is BoundKindTag.reference:
                imports.add(bound.rendered_type)
            else:
                raise ValueError(f"Unknown bound kind: {bound.kind}")
        return imports

    def is_empty(self) -> bool:
        return not self._committed

    def iter(self) -> Iterator[Bound]:
        return iter(self._committed)

    def __iter__(self) -> Iterator[Bound]:
        return self.iter()

    def iter_scope_markers(self) -> Iterator[str]:
        return iter(self._consumed_scope_markers)
