# SPDX-FileCopyrightText: Copyright (c) 2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from dataclasses import dataclass

from boundgen.errors import TypeRenderError
from boundgen.library import (
    BitfieldType,
    Concurrency,
    ContainerKind,
    ContainerType,
    EnumerationType,
    Fundamental,
    FundamentalType,
    FunctionType,
    Library,
    ParameterDirection,
    ParameterScope,
    RefMode,
    Type,
)

# Fundamental -> (borrowed text, owned text)
FUNDAMENTAL_TEXT: dict[Fundamental, tuple[str, str]] = {
    Fundamental.none: ("()", "()"),
    Fundamental.boolean: ("bool", "bool"),
    Fundamental.int8: ("i8", "i8"),
    Fundamental.uint8: ("u8", "u8"),
    Fundamental.int16: ("i16", "i16"),
    Fundamental.uint16: ("u16", "u16"),
    Fundamental.int32: ("i32", "i32"),
    Fundamental.uint32: ("u32", "u32"),
    Fundamental.int64: ("i64", "i64"),
    Fundamental.uint64: ("u64", "u64"),
    Fundamental.int: ("i32", "i32"),
    Fundamental.uint: ("u32", "u32"),
    Fundamental.long: ("libc::c_long", "libc::c_long"),
    Fundamental.ulong: ("libc::c_ulong", "libc::c_ulong"),
    Fundamental.size: ("usize", "usize"),
    Fundamental.ssize: ("isize", "isize"),
    Fundamental.float: ("f32", "f32"),
    Fundamental.double: ("f64", "f64"),
    Fundamental.char: ("i8", "i8"),
    Fundamental.uchar: ("u8", "u8"),
    Fundamental.unichar: ("char", "char"),
    Fundamental.utf8: ("str", "glib::GString"),
    Fundamental.filename: ("std::path::Path", "std::path::PathBuf"),
    Fundamental.os_string: ("std::ffi::OsStr", "std::ffi::OsString"),
    Fundamental.gtype: ("glib::types::Type", "glib::types::Type"),
}

_BORROWED_FUNDAMENTALS = (
    Fundamental.utf8,
    Fundamental.filename,
    Fundamental.os_string,
)


@dataclass(frozen=True)
class RenderOptions:
    direction: ParameterDirection = ParameterDirection.in_
    nullable: bool = False
    scope: ParameterScope = ParameterScope.call
    concurrency: Concurrency = Concurrency.none
    ref_mode: RefMode = RefMode.none
    construct_override: str | None = None


class TypeRenderer:
    """Turns a catalog type reference into target-language text.

    Subclasses implement `render`. A type that cannot be expressed raises
    `TypeRenderError`; callers treat that as a local failure.
    """

    def render(self, type_name: str, options: RenderOptions | None = None) -> str:
        raise NotImplementedError()

    def try_render(
        self, type_name: str, options: RenderOptions | None = None
    ) -> str | None:
        try:
            return self.render(type_name, options)
        except TypeRenderError:
            return None


class CatalogTypeRenderer(TypeRenderer):
    """Default renderer driven by the names declared in a `Library`.

    Parameters
    ----------
    library: Library
        The catalog that resolves type names.
    """

    def __init__(self, library: Library):
        self._library = library

    def render(self, type_name: str, options: RenderOptions | None = None) -> str:
        options = options or RenderOptions()
        typ = self._library.type_(type_name)

        if isinstance(typ, FunctionType):
            return self._render_function(typ, options)

        if options.construct_override is not None:
            text = options.construct_override
        elif isinstance(typ, ContainerType):
            return self._render_container(typ, options)
        else:
            text = self._base_text(typ, options)

        if options.ref_mode is RefMode.by_ref and not _is_copy(typ):
            text = "&" + text
        if options.nullable and options.ref_mode is not RefMode.by_ref_fake:
            text = f"Option<{text}>"
        return text

    def _base_text(self, typ: Type, options: RenderOptions) -> str:
        if isinstance(typ, FundamentalType):
            if typ.fundamental not in FUNDAMENTAL_TEXT:
                raise TypeRenderError(typ.name)
            borrowed, owned = FUNDAMENTAL_TEXT[typ.fundamental]
            if (
                options.direction is ParameterDirection.in_
                and options.ref_mode is not RefMode.none
            ):
                return borrowed
            return owned
        if typ.rendered:
            return typ.rendered
        return typ.name.rsplit(".", 1)[-1]

    def _render_container(self, typ: ContainerType, options: RenderOptions) -> str:
        element = self.render(
            typ.element, RenderOptions(direction=options.direction)
        )
        if options.direction is ParameterDirection.in_:
            if options.ref_mode is RefMode.by_ref:
                text = f"&[{element}]"
            elif options.ref_mode is RefMode.by_ref_fake:
                text = f"[{element}]"
            else:
                text = f"Vec<{element}>"
        elif typ.container is ContainerKind.c_array or typ.rendered is None:
            text = f"Vec<{element}>"
        else:
            text = f"{typ.rendered}<{element}>"
        if options.nullable and options.ref_mode is not RefMode.by_ref_fake:
            text = f"Option<{text}>"
        return text

    def _render_function(self, typ: FunctionType, options: RenderOptions) -> str:
        params = []
        for param in typ.parameters:
            ptype = self._library.type_(param.typ)
            # user data is carried by the closure itself
            if (
                isinstance(ptype, FundamentalType)
                and ptype.fundamental is Fundamental.pointer
            ):
                continue
            ref_mode = (
                RefMode.by_ref
                if param.direction is ParameterDirection.in_
                else RefMode.none
            )
            params.append(
                self.render(
                    param.typ,
                    RenderOptions(
                        direction=param.direction,
                        nullable=param.nullable,
                        ref_mode=ref_mode,
                    ),
                )
            )

        ret = ""
        if typ.ret.typ != Fundamental.none.value:
            ret = " -> " + self.render(
                typ.ret.typ,
                RenderOptions(
                    direction=ParameterDirection.out,
                    nullable=typ.ret.nullable,
                    construct_override=options.construct_override,
                ),
            )

        if options.scope is ParameterScope.async_:
            trait = "FnOnce"
        elif options.scope is ParameterScope.call:
            trait = "FnMut"
        else:
            trait = "Fn"

        text = f"{trait}({', '.join(params)}){ret}"
        if options.concurrency is Concurrency.send:
            text += " + Send"
        elif options.concurrency is Concurrency.send_sync:
            text += " + Send + Sync"
        if options.scope is not ParameterScope.call:
            text += " + 'static"
        return text


def _is_copy(typ: Type) -> bool:
    if isinstance(typ, FundamentalType):
        return typ.fundamental not in _BORROWED_FUNDAMENTALS
    return isinstance(typ, (EnumerationType, BitfieldType))
