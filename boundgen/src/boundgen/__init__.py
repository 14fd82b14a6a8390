# SPDX-FileCopyrightText: Copyright (c) 2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from boundgen.bounds import (
    Bound,
    BoundAllocator,
    BoundKind,
    BoundKindTag,
    CallbackInfo,
)
from boundgen.classify import bound_kind_for
from boundgen.callback import CallbackSynthesizer
from boundgen.catalog import FunctionCatalog
from boundgen.library import Library
from boundgen.parameter import ParameterAnalyzer
from boundgen.property import PropertyBound, PropertyBoundResolver
from boundgen.renderer import CatalogTypeRenderer, RenderOptions, TypeRenderer
from boundgen.function import FunctionBounds, FunctionsAnalyzer, analyze_function

import importlib.metadata

__version__ = importlib.metadata.version("boundgen")

__all__ = [
    "__version__",
    "Bound",
    "BoundAllocator",
    "BoundKind",
    "BoundKindTag",
    "CallbackInfo",
    "CallbackSynthesizer",
    "CatalogTypeRenderer",
    "FunctionBounds",
    "FunctionCatalog",
    "FunctionsAnalyzer",
    "Library",
    "ParameterAnalyzer",
    "PropertyBound",
    "PropertyBoundResolver",
    "RenderOptions",
    "TypeRenderer",
    "analyze_function",
    "bound_kind_for",
]
