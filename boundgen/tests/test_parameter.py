# SPDX-FileCopyrightText: Copyright (c) 2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

import pytest

from boundgen.bounds import BoundKind
from boundgen.errors import (
    DuplicateBoundError,
    ErrorTypeNotFoundError,
    TooManyTypeConstraintsError,
)
from boundgen.library import (
    Concurrency,
    Function,
    Parameter,
    ParameterDirection,
    ParameterScope,
)


def _param(func, name):
    for p in func.parameters:
        if p.name == name:
            return p
    raise AssertionError(name)


def test_async_callback_is_synthesized(analyzer, function):
    func = function("foo_async")

    marshal, info = analyzer.analyze(func, _param(func, "callback"), True)

    assert marshal is None
    assert info.bound_alias == "A"
    assert info.success_type_text == "i32"
    assert info.error_type_text == "glib::Error"
    assert info.callback_type_text == (
        "FnOnce(Result<i32, glib::Error>) + Send + 'static"
    )
    (bound,) = list(analyzer.allocator)
    assert bound.alias == "A"
    assert bound.kind == BoundKind.no_wrapper()
    assert bound.rendered_type == info.callback_type_text


def test_async_callback_takes_next_alias(analyzer, function):
    func = function("g_file_read_async")

    results = [analyzer.analyze(func, p, True) for p in func.parameters]

    # file (instance), io_priority, cancellable, callback, user_data
    assert [r[0] for r in results] == [".as_ref()", None, ".as_ref()", None, None]
    info = results[3][1]
    assert info.bound_alias == "B"
    assert info.success_type_text == "FileInputStream"
    assert analyzer.allocator.lookup_by_name("cancellable") == (
        "A",
        BoundKind.upcast(),
    )
    assert analyzer.allocator.lookup_by_name("callback") == (
        "B",
        BoundKind.no_wrapper(),
    )


def test_unresolved_completion_falls_through(analyzer, function):
    func = function("orphan_async")

    analyzer.analyze(func, _param(func, "source"), True)
    marshal, info = analyzer.analyze(func, _param(func, "callback"), True)

    assert marshal is None
    assert info is None
    alias, kind = analyzer.allocator.lookup_by_name("callback")
    assert (alias, kind) == ("B", BoundKind.no_wrapper())
    bound = list(analyzer.allocator)[1]
    assert bound.rendered_type == "FnMut(Option<&glib::Object>, &AsyncResult)"


def test_async_convenience_parameter_is_dropped(analyzer, function):
    func = function("g_file_load_contents_async")

    assert analyzer.analyze(func, _param(func, "user_data"), True) == (None, None)
    assert analyzer.allocator.is_empty()


def test_instance_parameter_only_marshals(analyzer, function):
    func = function("g_file_load_contents_async")

    marshal, info = analyzer.analyze(func, _param(func, "file"), True)

    assert marshal == ".as_ref()"
    assert info is None
    assert analyzer.allocator.is_empty()


def test_final_instance_parameter(analyzer, function):
    func = function("gtk_label_set_label")

    assert analyzer.analyze(func, _param(func, "label"), False) == (None, None)


def test_nullable_and_final_parameters(analyzer, function):
    func = function("gtk_label_set_label")

    results = {p.name: analyzer.analyze(func, p, False) for p in func.parameters}

    assert results["text"] == (None, None)
    assert results["buddy"] == (None, None)
    assert results["mnemonic_widget"] == (".as_ref()", None)
    assert [b.parameter_name for b in analyzer.allocator] == ["mnemonic_widget"]


def test_out_parameters_are_never_bounded(analyzer):
    func = Function(
        "get_file",
        "get_file",
        parameters=[
            Parameter("file", "Gio.File", direction=ParameterDirection.out)
        ],
    )

    assert analyzer.analyze(func, func.parameters[0], False) == (None, None)
    assert analyzer.allocator.is_empty()


def test_path_parameter(analyzer, function):
    func = function("g_file_new_for_path")

    marshal, info = analyzer.analyze(func, _param(func, "path"), False)

    assert marshal == ".as_ref()"
    assert info is None
    assert analyzer.allocator.required_imports() == {"std::path::Path"}


def test_plain_callback(analyzer, function):
    func = function("gtk_container_foreach")

    results = [analyzer.analyze(func, p, False) for p in func.parameters]

    marshal, info = results[1]
    assert marshal is None
    assert info.callback_type_text == "FnMut(&Widget)"
    assert info.success_type_text == ""
    assert info.error_type_text == ""
    assert info.bound_alias == "A"
    assert results[2] == (None, None)
    assert analyzer.allocator.lookup_by_name("callback") == (
        "A",
        BoundKind.no_wrapper(),
    )


def test_callback_concurrency(analyzer, function):
    func = function("gtk_container_foreach")

    _, info = analyzer.analyze(
        func, _param(func, "callback"), False, Concurrency.send
    )

    assert info.callback_type_text == "FnMut(&Widget) + Send"


def test_nullable_plain_callback_is_not_registered(analyzer):
    param = Parameter("func", "Gtk.Callback", nullable=True)
    func = Function("with_callback", "with_callback", parameters=[param])

    marshal, info = analyzer.analyze(func, param, False)

    assert marshal is None
    assert info.callback_type_text == "FnMut(&Widget)"
    assert analyzer.allocator.is_empty()


def test_destroy_notify_is_never_registered(analyzer, function):
    func = function("g_object_set_data_full")

    results = [analyzer.analyze(func, p, False) for p in func.parameters]

    assert results[1] == (None, None)
    assert results[2] == (None, None)
    marshal, info = results[3]
    assert marshal is None
    assert info.callback_type_text == "FnOnce() + 'static"
    assert analyzer.allocator.is_empty()


def test_missing_error_type_is_fatal(analyzer, function):
    func = function("bad_async")

    with pytest.raises(ErrorTypeNotFoundError) as e:
        analyzer.analyze(func, _param(func, "callback"), True)

    assert e.value.function_identifier == "bad_finish"


def test_too_many_type_constraints(analyzer):
    params = [Parameter(f"file{i}", "Gio.File") for i in range(27)]
    func = Function("many", "g_many_files", parameters=params)

    for p in params[:26]:
        analyzer.analyze(func, p, False)

    with pytest.raises(TooManyTypeConstraintsError) as e:
        analyzer.analyze(func, params[26], False)

    assert e.value.function_identifier == "g_many_files"
    assert str(e.value) == "Too many type constraints for g_many_files"
    assert not isinstance(e.value, DuplicateBoundError)


def test_duplicate_parameter_name(analyzer):
    params = [Parameter("file", "Gio.File"), Parameter("file", "Gio.File")]
    func = Function("dup", "g_dup", parameters=params)

    analyzer.analyze(func, params[0], False)
    with pytest.raises(DuplicateBoundError) as e:
        analyzer.analyze(func, params[1], False)

    assert e.value.parameter_name == "file"
    assert e.value.function_identifier == "g_dup"
    assert len(list(analyzer.allocator)) == 1


def test_unrenderable_parameter(analyzer):
    param = Parameter("opaque", "pointer")
    func = Function("f", "f", parameters=[param])

    assert analyzer.analyze(func, param, False) == (None, None)
    assert analyzer.allocator.is_empty()


def _async_pair(library, callback_names, finish_parameters):
    finish = Function("x_finish", "x_finish", parameters=finish_parameters)
    func = Function(
        "x_async",
        "x_async",
        parameters=[
            Parameter(
                name,
                "Gio.AsyncReadyCallback",
                c_type="GAsyncReadyCallback",
                scope=ParameterScope.async_,
            )
            for name in callback_names
        ],
    )
    library.add_function(finish)
    library.add_function(func)
    return func


def test_suffixed_async_callback(analyzer, library):
    func = _async_pair(
        library,
        ["ready_callback"],
        [
            Parameter("count", "int32", direction=ParameterDirection.out),
            Parameter("error", "GLib.Error", direction=ParameterDirection.out),
        ],
    )

    marshal, info = analyzer.analyze(func, func.parameters[0], True)

    assert marshal is None
    assert info.bound_alias == "A"
    assert info.callback_type_text == (
        "FnOnce(Result<i32, glib::Error>) + Send + 'static"
    )
    assert analyzer.allocator.lookup_by_name("ready_callback") == (
        "A",
        BoundKind.no_wrapper(),
    )


def test_suffixed_async_callback_is_not_a_reserved_slot(analyzer, library):
    func = _async_pair(
        library,
        ["ready_callback", "ready_callback"],
        [Parameter("error", "GLib.Error", direction=ParameterDirection.out)],
    )

    analyzer.analyze(func, func.parameters[0], True)
    with pytest.raises(DuplicateBoundError) as e:
        analyzer.analyze(func, func.parameters[1], True)

    assert e.value.parameter_name == "ready_callback"
    assert e.value.function_identifier == "x_async"


def test_missing_error_type_wins_over_render_failure(analyzer, library):
    func = _async_pair(
        library,
        ["callback"],
        [Parameter("blob", "pointer", direction=ParameterDirection.out)],
    )

    with pytest.raises(ErrorTypeNotFoundError) as e:
        analyzer.analyze(func, func.parameters[0], True)

    assert e.value.function_identifier == "x_finish"
    assert analyzer.allocator.is_empty()
