# SPDX-FileCopyrightText: Copyright (c) 2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from dataclasses import dataclass
from warnings import warn

from boundgen.aliases import TYPE_PARAMETERS_START
from boundgen.errors import TypeRenderError
from boundgen.library import Library, RefMode
from boundgen.renderer import RenderOptions, TypeRenderer


@dataclass(frozen=True)
class PropertyBound:
    alias: str
    rendered_type: str


class PropertyBoundResolver:
    """Bound of a property accessor.

    An accessor has a single value parameter, so it needs at most one bound
    and always names it with the first alias.
    """

    def __init__(self, library: Library, renderer: TypeRenderer):
        self._library = library
        self._renderer = renderer

    def resolve(self, type_name: str) -> PropertyBound | None:
        try:
            if self._library.type_(type_name).is_final_type():
                return None
            rendered = self._renderer.render(
                type_name, RenderOptions(ref_mode=RefMode.by_ref_fake)
            )
        except TypeRenderError as e:
            warn(f"No property bound for {type_name}: {e}")
            return None
        return PropertyBound(alias=TYPE_PARAMETERS_START, rendered_type=rendered)
