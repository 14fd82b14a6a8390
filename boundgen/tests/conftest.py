# SPDX-FileCopyrightText: Copyright (c) 2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

import os

import pytest

from boundgen.catalog import FunctionCatalog
from boundgen.library import Library
from boundgen.parameter import ParameterAnalyzer
from boundgen.renderer import CatalogTypeRenderer


@pytest.fixture
def gio_catalog_path():
    current_directory = os.path.dirname(os.path.abspath(__file__))

    return os.path.join(current_directory, "data", "gio.yml")


@pytest.fixture
def library(gio_catalog_path):
    return Library.from_yaml_path(gio_catalog_path)


@pytest.fixture
def catalog(library):
    return FunctionCatalog(library)


@pytest.fixture
def renderer(library):
    return CatalogTypeRenderer(library)


@pytest.fixture
def analyzer(catalog, renderer):
    return ParameterAnalyzer(catalog, renderer)


@pytest.fixture
def function(library):
    def _lookup(c_identifier):
        func = library.function_by_identifier(c_identifier)
        assert func is not None, c_identifier
        return func

    return _lookup
