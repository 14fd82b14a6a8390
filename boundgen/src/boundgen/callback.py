# SPDX-FileCopyrightText: Copyright (c) 2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import Sequence

from boundgen.bounds import CallbackInfo
from boundgen.catalog import FunctionCatalog, FunctionOverride
from boundgen.errors import ErrorTypeNotFoundError
from boundgen.library import Function, Parameter, ParameterDirection, RecordType
from boundgen.renderer import RenderOptions, TypeRenderer

DEFAULT_CALLBACK_TEMPLATE = "FnOnce(Result<{success}, {error}>) + Send + 'static"
"""A single-invocation, thread-transferable function taking a result."""

DEFAULT_UNIT_TYPE = "()"


def format_out_parameters(parameters: Sequence[str]) -> str | None:
    """Join rendered result types into one success type.

    Returns None for an empty list, the bare text for a single type and a
    parenthesized tuple otherwise.
    """
    if not parameters:
        return None
    if len(parameters) == 1:
        return parameters[0]
    return f"({', '.join(parameters)})"


def _nullable_override(
    param: Parameter, configured_functions: Sequence[FunctionOverride]
) -> bool:
    for override in configured_functions:
        p = override.parameters.get(param.name)
        if p is not None and p.nullable is not None:
            return p.nullable
    return param.nullable


class CallbackSynthesizer:
    """Build the result callback of an asynchronous function.

    The result type is read off the completion function: its out parameters
    (minus the array length companion and `error`) form the success type and
    its `error` out parameter the error type.

    Parameters
    ----------
    catalog: FunctionCatalog
        Used for the array length convention.
    renderer: TypeRenderer
        Renders the result types.
    callback_template: str
        Format string with `{success}` and `{error}` fields.
    unit_type: str
        Success text used when the completion function yields nothing.
    """

    def __init__(
        self,
        catalog: FunctionCatalog,
        renderer: TypeRenderer,
        callback_template: str = DEFAULT_CALLBACK_TEMPLATE,
        unit_type: str = DEFAULT_UNIT_TYPE,
    ):
        self._catalog = catalog
        self._renderer = renderer
        self._callback_template = callback_template
        self._unit_type = unit_type

    def find_out_parameters(
        self,
        function: Function,
        configured_functions: Sequence[FunctionOverride] = (),
    ) -> list[str]:
        index_to_ignore = self._catalog.find_ignorable_parameter_index(
            function.parameters, function.ret
        )
        rendered = []
        for index, param in enumerate(function.parameters):
            if index == index_to_ignore:
                continue
            if param.direction is not ParameterDirection.out:
                continue
            if param.name == "error":
                continue
            rendered.append(
                self._renderer.render(
                    param.typ,
                    RenderOptions(
                        direction=param.direction,
                        nullable=_nullable_override(param, configured_functions),
                    ),
                )
            )
        return rendered

    def find_error_type(self, function: Function) -> str:
        identifier = function.c_identifier or function.name
        for param in function.parameters:
            if param.direction is ParameterDirection.out and param.name == "error":
                break
        else:
            raise ErrorTypeNotFoundError(identifier)

        if not self._catalog.library.has_type(param.typ) or not isinstance(
            self._catalog.library.type_(param.typ), RecordType
        ):
            raise ErrorTypeNotFoundError(identifier)

        return self._renderer.render(
            param.typ, RenderOptions(direction=param.direction)
        )

    def synthesize(
        self,
        completion_function: Function,
        fold_return_into_result: bool,
        configured_functions: Sequence[FunctionOverride] = (),
    ) -> tuple[str | None, str]:
        """Compute the success and error types of a completion function.

        Returns:
            tuple[str | None, str]: The success type text (None when the
            function yields nothing) and the error type text.

        Raises:
            ErrorTypeNotFoundError: If the completion function has no `error`
                out parameter of record type.
            TypeRenderError: If a result type cannot be rendered.
        """
        error = self.find_error_type(completion_function)
        out_parameters = self.find_out_parameters(
            completion_function, configured_functions
        )
        if fold_return_into_result:
            ret = completion_function.ret
            out_parameters.insert(
                0,
                self._renderer.render(
                    ret.typ,
                    RenderOptions(direction=ret.direction, nullable=ret.nullable),
                ),
            )
        success = format_out_parameters(out_parameters)
        return success, error

    def callback_type(self, success: str | None, error: str) -> str:
        return self._callback_template.format(
            success=self._unit_type if success is None else success,
            error=error,
        )

    def callback_info(
        self,
        completion_function: Function,
        bound_alias: str,
        configured_functions: Sequence[FunctionOverride] = (),
    ) -> CallbackInfo:
        fold = self._catalog.use_return_for_result(
            completion_function, list(configured_functions)
        )
        success, error = self.synthesize(
            completion_function, fold, configured_functions
        )
        return CallbackInfo(
            callback_type_text=self.callback_type(success, error),
            success_type_text=self._unit_type if success is None else success,
            error_type_text=error,
            bound_alias=bound_alias,
        )
