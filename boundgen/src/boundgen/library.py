# SPDX-FileCopyrightText: Copyright (c) 2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""In-memory model of the interface-description catalog.

The catalog describes the native library being bound: its types and its
functions, with per-parameter metadata (direction, nullability, scope, the
native type label and so on). It is normally loaded from a YAML document::

    Types:
      - name: Gio.File
        kind: interface
        rendered: File
    Functions:
      - name: load_contents_async
        c_identifier: g_file_load_contents_async
        parameters:
          - {name: file, type: Gio.File, instance: true}
          - {name: callback, type: Gio.AsyncReadyCallback, scope: async}
        return: {type: none}

Fundamental types are pre-registered under the values of `Fundamental`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import yaml

from boundgen.errors import TypeNotFoundError


class Fundamental(str, Enum):
    none = "none"
    boolean = "boolean"
    int8 = "int8"
    uint8 = "uint8"
    int16 = "int16"
    uint16 = "uint16"
    int32 = "int32"
    uint32 = "uint32"
    int64 = "int64"
    uint64 = "uint64"
    int = "int"
    uint = "uint"
    long = "long"
    ulong = "ulong"
    size = "size"
    ssize = "ssize"
    float = "float"
    double = "double"
    char = "char"
    uchar = "uchar"
    unichar = "unichar"
    utf8 = "utf8"
    filename = "filename"
    os_string = "os_string"
    pointer = "pointer"
    gtype = "gtype"
    unsupported = "unsupported"


class ParameterDirection(str, Enum):
    in_ = "in"
    out = "out"
    inout = "inout"


class ParameterScope(str, Enum):
    """Lifetime of a callback parameter relative to the call."""

    call = "call"
    async_ = "async"
    notified = "notified"
    forever = "forever"


class Concurrency(str, Enum):
    """Thread-transfer policy of the object a function belongs to."""

    none = "none"
    send = "send"
    send_sync = "send+sync"


class RefMode(str, Enum):
    """How a type is borrowed when rendered.

    `by_ref_fake` renders the referent without a borrow annotation, which is
    the text used inside a bound.
    """

    none = "none"
    by_ref = "by_ref"
    by_ref_fake = "by_ref_fake"


class ContainerKind(str, Enum):
    list = "list"
    slist = "slist"
    c_array = "c_array"


@dataclass
class Type:
    name: str
    rendered: str | None = None

    def is_final_type(self) -> bool:
        return True

    def is_function(self) -> bool:
        return False


@dataclass
class FundamentalType(Type):
    fundamental: Fundamental = Fundamental.unsupported


@dataclass
class ClassType(Type):
    final_type: bool = False

    def is_final_type(self) -> bool:
        return self.final_type


@dataclass
class InterfaceType(Type):
    def is_final_type(self) -> bool:
        return False


@dataclass
class RecordType(Type):
    pass


@dataclass
class EnumerationType(Type):
    pass


@dataclass
class BitfieldType(Type):
    pass


@dataclass
class UnionType(Type):
    pass


@dataclass
class ContainerType(Type):
    container: ContainerKind = ContainerKind.list
    element: str = Fundamental.pointer.value


@dataclass
class Parameter:
    name: str
    typ: str
    c_type: str = ""
    direction: ParameterDirection = ParameterDirection.in_
    nullable: bool = False
    instance_parameter: bool = False
    scope: ParameterScope = ParameterScope.call
    array_length: int | None = None
    construct_override: str | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "Parameter":
        try:
            name = d["name"]
            typ = d["type"]
        except (KeyError, TypeError):
            raise ValueError(f"Parameter entry needs `name` and `type`: {d!r}")
        return cls(
            name=name,
            typ=typ,
            c_type=d.get("c_type", ""),
            direction=ParameterDirection(d.get("direction", "in")),
            nullable=bool(d.get("nullable", False)),
            instance_parameter=bool(d.get("instance", False)),
            scope=ParameterScope(d.get("scope", "call")),
            array_length=d.get("array_length", None),
            construct_override=d.get("construct_override", None),
        )


def _return_from_dict(d: dict[str, Any] | None) -> Parameter:
    d = dict(d or {})
    d.setdefault("type", Fundamental.none.value)
    d.setdefault("name", "")
    d.setdefault("direction", "out")
    return Parameter.from_dict(d)


@dataclass
class FunctionType(Type):
    parameters: list[Parameter] = field(default_factory=list)
    ret: Parameter = field(
        default_factory=lambda: _return_from_dict(None)
    )

    def is_function(self) -> bool:
        return True


@dataclass
class Function:
    """A native function of the catalog.

    `c_identifier` is the native symbol; it is what diagnostics report and
    what completion-function lookups key on.
    """

    name: str
    c_identifier: str | None
    parameters: list[Parameter] = field(default_factory=list)
    ret: Parameter = field(
        default_factory=lambda: _return_from_dict(None)
    )
    finish_func: str | None = None

    def __str__(self):
        params = ", ".join(f"{p.name}: {p.typ}" for p in self.parameters)
        return f"{self.c_identifier or self.name}({params}) -> {self.ret.typ}"

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "Function":
        if "name" not in d:
            raise ValueError(f"Function entry needs a `name`: {d!r}")
        return cls(
            name=d["name"],
            c_identifier=d.get("c_identifier", None),
            parameters=[
                Parameter.from_dict(p) for p in d.get("parameters") or []
            ],
            ret=_return_from_dict(d.get("return")),
            finish_func=d.get("finish_func", None),
        )


_TYPE_KINDS = {
    "class": ClassType,
    "interface": InterfaceType,
    "record": RecordType,
    "enumeration": EnumerationType,
    "bitfield": BitfieldType,
    "union": UnionType,
    "list": ContainerType,
    "slist": ContainerType,
    "c_array": ContainerType,
    "function": FunctionType,
}


def type_from_dict(d: dict[str, Any]) -> Type:
    """Build a catalog type declaration from its dictionary form."""
    try:
        name = d["name"]
        kind = d["kind"]
    except (KeyError, TypeError):
        raise ValueError(f"Type entry needs `name` and `kind`: {d!r}")

    if kind not in _TYPE_KINDS:
        raise ValueError(f"Unknown type kind {kind!r} for {name}")

    rendered = d.get("rendered", None)
    if kind == "class":
        return ClassType(name, rendered, final_type=bool(d.get("final", False)))
    if kind in ("list", "slist", "c_array"):
        return ContainerType(
            name,
            rendered,
            container=ContainerKind(kind),
            element=d.get("element", Fundamental.pointer.value),
        )
    if kind == "function":
        return FunctionType(
            name,
            rendered,
            parameters=[
                Parameter.from_dict(p) for p in d.get("parameters") or []
            ],
            ret=_return_from_dict(d.get("return")),
        )
    return _TYPE_KINDS[kind](name, rendered)


class Library:
    """Registry of the types and functions of one interface description."""

    def __init__(self, namespace: str = ""):
        self.namespace = namespace
        self._types: dict[str, Type] = {
            f.value: FundamentalType(f.value, fundamental=f) for f in Fundamental
        }
        self._functions: dict[str, Function] = {}
        self._function_order: list[Function] = []

    def add_type(self, typ: Type):
        self._types[typ.name] = typ

    def add_function(self, func: Function):
        self._function_order.append(func)
        if func.c_identifier:
            self._functions.setdefault(func.c_identifier, func)

    def type_(self, name: str) -> Type:
        try:
            return self._types[name]
        except KeyError:
            raise TypeNotFoundError(name)

    def has_type(self, name: str) -> bool:
        return name in self._types

    def function_by_identifier(self, c_identifier: str) -> Function | None:
        return self._functions.get(c_identifier)

    @property
    def functions(self) -> list[Function]:
        return list(self._function_order)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "Library":
        if not isinstance(d, dict):
            raise ValueError("Catalog document must be a mapping.")
        lib = cls(d.get("Namespace", "") or "")
        for t in d.get("Types") or []:
            lib.add_type(type_from_dict(t))
        for f in d.get("Functions") or []:
            lib.add_function(Function.from_dict(f))
        return lib

    @classmethod
    def from_yaml_path(cls, path: str) -> "Library":
        with open(path) as f:
            d = yaml.safe_load(f)
        return cls.from_dict(d)
