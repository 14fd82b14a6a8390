# SPDX-FileCopyrightText: Copyright (c) 2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from boundgen.bounds import BoundKind
from boundgen.library import (
    ClassType,
    ContainerType,
    Fundamental,
    FundamentalType,
    InterfaceType,
    Type,
)

DEFAULT_MARSHAL_CALL = ".as_ref()"
"""Call appended to a bounded argument before it reaches the native layer."""

_PATH_LIKE = (Fundamental.filename, Fundamental.os_string)


def bound_kind_for(typ: Type, nullable: bool) -> BoundKind | None:
    """Map a catalog type and its nullability to a candidate bound kind.

    Parameters:
        typ (Type): The resolved catalog type of the parameter.
        nullable (bool): Whether the parameter accepts a null value.

    Returns:
        BoundKind | None: The bound the parameter would need, or None when it
        is rendered as a concrete type. The first matching rule wins; path
        primitives take a reference bound even when nullable, while any other
        nullable primitive never takes a bound.
    """
    if isinstance(typ, FundamentalType):
        if typ.fundamental in _PATH_LIKE:
            return BoundKind.reference()
        if nullable:
            return None
    if isinstance(typ, ClassType):
        return None if typ.final_type else BoundKind.upcast()
    if isinstance(typ, InterfaceType):
        return BoundKind.upcast()
    if isinstance(typ, ContainerType):
        return None
    if typ.is_function():
        return BoundKind.no_wrapper()
    return None


def marshal_call_for(
    kind: BoundKind, marshal_call: str = DEFAULT_MARSHAL_CALL
) -> str | None:
    """The extra call needed to hand a value of bound `kind` to native code."""
    if kind.needs_marshal_call():
        return marshal_call
    return None
