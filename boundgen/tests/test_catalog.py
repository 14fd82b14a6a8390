# SPDX-FileCopyrightText: Copyright (c) 2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

import pytest

from boundgen.catalog import (
    FunctionOverride,
    derive_completion_name,
    find_ignorable_parameter_index,
    is_removable_async_param,
)
from boundgen.library import Function, Parameter


@pytest.mark.parametrize(
    "name, expected",
    [
        ("foo_async", "foo_finish"),
        ("g_file_read_async", "g_file_read_finish"),
        ("foo", "foo_finish"),
        ("async_foo", "async_foo_finish"),
    ],
)
def test_derive_completion_name(name, expected):
    assert derive_completion_name(name) == expected


def test_find_ignorable_parameter_index(function):
    finish = function("g_file_load_contents_finish")

    assert find_ignorable_parameter_index(finish.parameters, finish.ret) == 3
    assert find_ignorable_parameter_index([], None) is None

    ret = Parameter("", "GLib.Bytes", array_length=1)
    assert find_ignorable_parameter_index([Parameter("a", "int32")], ret) == 1


@pytest.mark.parametrize(
    "name, expected",
    [
        ("user_data", True),
        ("callback_data", True),
        ("data", True),
        ("cancellable", False),
        ("callback", False),
    ],
)
def test_is_removable_async_param(name, expected):
    assert is_removable_async_param(name) is expected


def test_find_function(catalog):
    assert catalog.find_function("foo_finish").name == "foo_finish"
    assert catalog.find_function("missing_finish") is None


def test_is_async(catalog, function):
    assert catalog.is_async(function("g_file_load_contents_async"))
    assert catalog.is_async(function("orphan_async"))
    assert not catalog.is_async(function("gtk_container_foreach"))
    assert not catalog.is_async(function("g_object_set_data_full"))
    assert catalog.is_async(Function("x", "x", finish_func="x_finish"))


def test_use_return_for_result(catalog, function):
    # boolean success flags are not part of the result
    assert not catalog.use_return_for_result(
        function("g_file_load_contents_finish"), []
    )
    assert catalog.use_return_for_result(function("g_file_read_finish"), [])
    assert not catalog.use_return_for_result(function("foo_finish"), [])


def test_use_return_for_result_override(catalog, function):
    finish = function("g_file_load_contents_finish")
    override = FunctionOverride("g_file_load_contents_finish", True)

    assert catalog.use_return_for_result(finish, [override])
    assert not catalog.use_return_for_result(
        function("g_file_read_finish"),
        [FunctionOverride("g_file_read_finish", False)],
    )

    with pytest.warns(UserWarning, match="no return value"):
        assert not catalog.use_return_for_result(
            function("foo_finish"), [FunctionOverride("foo_finish", True)]
        )


def test_configured_functions(library):
    from boundgen.catalog import FunctionCatalog

    override = FunctionOverride.from_dict(
        "foo_finish",
        {"Use Return For Result": False, "Parameters": {"count": {"Nullable": True}}},
    )
    catalog = FunctionCatalog(library, overrides={"foo_finish": override})

    assert catalog.configured_functions("foo_finish") == [override]
    assert catalog.configured_functions("foo_async") == []
    assert catalog.configured_functions(None) == []
    assert override.parameters["count"].nullable is True


@pytest.mark.parametrize(
    "entry",
    [
        {"Parameters": {"etag_out": True}},
        {"Parameters": {"etag_out": ["Nullable"]}},
        ["Use Return For Result"],
    ],
)
def test_function_override_malformed(entry):
    with pytest.raises(ValueError):
        FunctionOverride.from_dict("g_file_load_contents_finish", entry)
