# SPDX-FileCopyrightText: Copyright (c) 2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from boundgen.bounds import Bound, BoundAllocator, BoundKindTag


class SignatureRenderer:
    """Render the generic part of a wrapper signature from committed bounds."""

    constraint_templates = {
        BoundKindTag.no_wrapper: "{alias}: {type}",
        BoundKindTag.upcast: "{alias}: IsA<{type}>",
        BoundKindTag.reference: "{alias}: AsRef<{type}>",
    }

    scope_marker_template = "'{marker}"

    def __init__(self, allocator: BoundAllocator):
        self._allocator = allocator

    def render_constraint(self, bound: Bound) -> str:
        text = self.constraint_templates[bound.kind.tag].format(
            alias=bound.alias, type=bound.rendered_type
        )
        if bound.kind.scope_marker is not None:
            text += " + " + self.scope_marker_template.format(
                marker=bound.kind.scope_marker
            )
        return text

    def render_type_parameters(self) -> str:
        """The `<...>` list declaring scope markers then type parameters.

        Empty when the function needs no generics.
        """
        items = [
            self.scope_marker_template.format(marker=m)
            for m in self._allocator.iter_scope_markers()
        ]
        items += [self.render_constraint(b) for b in self._allocator]
        if not items:
            return ""
        return f"<{', '.join(items)}>"

    def render_parameter_type(self, name: str, nullable: bool = False) -> str | None:
        """Type text of parameter `name` in the wrapper, if it is bound."""
        info = self._allocator.lookup_by_name(name)
        if info is None:
            return None
        alias, kind = info
        if kind.tag is BoundKindTag.no_wrapper:
            return alias

        base = self._allocator.base_scope_marker(alias)
        text = f"&'{base} {alias}" if base is not None else f"&{alias}"
        if nullable:
            text = f"Option<{text}>"
        return text
