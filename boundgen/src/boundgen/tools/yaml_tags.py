# SPDX-FileCopyrightText: Copyright (c) 2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

import yaml


def string_constructor(loader: yaml.Loader, node: yaml.Node) -> str:
    """Join the items of a `!boundgen_join` sequence into one string.

    Example::

        Catalog: !boundgen_join [*root, "/gio.yml"]
    """
    if not isinstance(node, yaml.SequenceNode):
        raise yaml.constructor.ConstructorError(
            None,
            None,
            f"!boundgen_join expects a sequence, got {node.id}",
            node.start_mark,
        )
    seq = loader.construct_sequence(node)
    return "".join(str(i) for i in seq)
