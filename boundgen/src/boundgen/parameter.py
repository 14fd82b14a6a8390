# SPDX-FileCopyrightText: Copyright (c) 2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import Sequence
from warnings import warn

from boundgen.bounds import BoundAllocator, CallbackInfo
from boundgen.callback import CallbackSynthesizer
from boundgen.catalog import FunctionCatalog, FunctionOverride
from boundgen.classify import DEFAULT_MARSHAL_CALL, bound_kind_for, marshal_call_for
from boundgen.errors import (
    DuplicateBoundError,
    TooManyTypeConstraintsError,
    TypeRenderError,
)
from boundgen.library import (
    Concurrency,
    Function,
    FunctionType,
    Parameter,
    ParameterDirection,
    RefMode,
)
from boundgen.renderer import RenderOptions, TypeRenderer

DEFAULT_DESTROY_NOTIFY_CTYPE = "GDestroyNotify"
"""Native type label of the generic resource-destructor callback."""


def _is_async_callback_name(name: str) -> bool:
    return name == "callback" or name.endswith("_callback")


class ParameterAnalyzer:
    """Decide the bound of each parameter of one function.

    One analyzer wraps one `BoundAllocator`; `analyze` is called for every
    parameter in declaration order, since alias assignment depends on the
    parameters seen before.

    Parameters
    ----------
    catalog: FunctionCatalog
        Resolves types and completion functions.
    renderer: TypeRenderer
        Renders parameter types.
    allocator: BoundAllocator, Optional
        The allocator shared by all parameters of the function. A fresh one is
        created if omitted.
    synthesizer: CallbackSynthesizer, Optional
        Builds result callbacks of asynchronous functions.
    destroy_notify_ctype: str
        Native type label of destructor callbacks, which never get a bound.
    marshal_call: str
        Extra call emitted for bounded arguments.
    """

    def __init__(
        self,
        catalog: FunctionCatalog,
        renderer: TypeRenderer,
        allocator: BoundAllocator | None = None,
        synthesizer: CallbackSynthesizer | None = None,
        destroy_notify_ctype: str = DEFAULT_DESTROY_NOTIFY_CTYPE,
        marshal_call: str = DEFAULT_MARSHAL_CALL,
    ):
        self._catalog = catalog
        self._renderer = renderer
        self.allocator = allocator if allocator is not None else BoundAllocator()
        self._synthesizer = synthesizer or CallbackSynthesizer(catalog, renderer)
        self._destroy_notify_ctype = destroy_notify_ctype
        self._marshal_call = marshal_call

    def analyze(
        self,
        function: Function,
        parameter: Parameter,
        is_async_context: bool,
        concurrency_policy: Concurrency = Concurrency.none,
        configured_functions: Sequence[FunctionOverride] = (),
    ) -> tuple[str | None, CallbackInfo | None]:
        """Analyze one parameter and register its bound, if it needs one.

        Returns:
            tuple[str | None, CallbackInfo | None]: The extra marshal call for
            the argument and the synthesized callback signature, each None
            when not applicable.

        Raises:
            TooManyTypeConstraintsError: If the bound cannot be registered.
            ErrorTypeNotFoundError: If the completion function of an async
                callback lacks a usable error type.
        """
        type_string = self._renderer.try_render(
            parameter.typ, RenderOptions(ref_mode=RefMode.by_ref_fake)
        )
        if type_string is None or (
            is_async_context
            and self._catalog.is_removable_async_param(parameter.name)
        ):
            return None, None

        typ = self._catalog.library.type_(parameter.typ)
        kind = bound_kind_for(typ, parameter.nullable)

        if parameter.instance_parameter:
            if kind is None:
                return None, None
            return marshal_call_for(kind, self._marshal_call), None

        if parameter.direction is not ParameterDirection.in_ or kind is None:
            return None, None

        marshal_call = marshal_call_for(kind, self._marshal_call)
        callback_info = None
        need_is_into_check = False
        is_destroy_notify = parameter.c_type == self._destroy_notify_ctype

        if is_async_context and _is_async_callback_name(parameter.name):
            callback_info = self._async_callback_info(
                function, configured_functions
            )
            if callback_info is not None:
                type_string = callback_info.callback_type_text
        elif is_destroy_notify or typ.is_function():
            need_is_into_check = not is_destroy_notify
            if isinstance(typ, FunctionType):
                try:
                    type_string = self._renderer.render(
                        parameter.typ,
                        RenderOptions(
                            direction=parameter.direction,
                            scope=parameter.scope,
                            concurrency=concurrency_policy,
                            construct_override=parameter.construct_override,
                        ),
                    )
                except TypeRenderError as e:
                    warn(
                        f"Skipping callback {parameter.name} of "
                        f"{self._identifier(function)}: {e}"
                    )
                    return None, None
                callback_info = CallbackInfo(
                    callback_type_text=type_string,
                    success_type_text="",
                    error_type_text="",
                    bound_alias=self.allocator.next_alias(),
                )

        if is_destroy_notify or (need_is_into_check and parameter.nullable):
            return marshal_call, callback_info

        if not self.allocator.register(
            parameter.name, type_string, kind, is_async_context
        ):
            self._raise_registration_error(function, parameter, is_async_context)

        return marshal_call, callback_info

    def _async_callback_info(
        self,
        function: Function,
        configured_functions: Sequence[FunctionOverride],
    ) -> CallbackInfo | None:
        if function.c_identifier is None:
            return None
        completion_name = self._catalog.derive_completion_name(
            function.c_identifier
        )
        completion = self._catalog.find_function(completion_name)
        if completion is None:
            return None

        overrides = list(configured_functions) + self._catalog.configured_functions(
            completion_name
        )
        try:
            return self._synthesizer.callback_info(
                completion, self.allocator.next_alias(), overrides
            )
        except TypeRenderError as e:
            warn(
                f"Result type of {completion_name} cannot be rendered, "
                f"{function.c_identifier} keeps its plain callback: {e}"
            )
            return None

    def _raise_registration_error(
        self, function: Function, parameter: Parameter, is_async_context: bool
    ):
        identifier = self._identifier(function)
        special = is_async_context and parameter.name == "callback"
        if not special and self.allocator.lookup_by_name(parameter.name):
            raise DuplicateBoundError(identifier, parameter.name)
        raise TooManyTypeConstraintsError(identifier)

    @staticmethod
    def _identifier(function: Function) -> str:
        return function.c_identifier or function.name
