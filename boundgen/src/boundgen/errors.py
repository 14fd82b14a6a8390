# SPDX-FileCopyrightText: Copyright (c) 2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0


class BaseBoundError(Exception):
    pass


class TypeRenderError(BaseBoundError):
    """Indicate that a type could not be rendered into target text.

    Rendering failures are local: the parameter carrying the type simply
    receives no bound.
    """

    def __init__(self, type_name, reason: str = "cannot be rendered"):
        self._type_name = type_name
        super().__init__(f"{type_name} {reason}.")

    @property
    def type_name(self):
        return self._type_name


class TypeNotFoundError(TypeRenderError):
    """Indicate that a type name is not declared in the interface catalog."""

    def __init__(self, type_name):
        super().__init__(type_name, "is not found in the type catalog")


class AliasPoolExhaustedError(BaseBoundError):
    """Indicate that every symbol of a finite alias pool is in use."""

    def __init__(self, capacity: int):
        self._capacity = capacity
        super().__init__(f"All {capacity} aliases of the pool are in use.")

    @property
    def capacity(self):
        return self._capacity


class ScopeMarkerPoolExhaustedError(AliasPoolExhaustedError):
    pass


class FatalFunctionError(BaseBoundError):
    """Base class of conditions that abort the analysis of one function.

    The batch driver may catch these to skip the offending function and keep
    generating the rest of the interface surface.
    """

    def __init__(self, function_identifier: str, message: str):
        self._function_identifier = function_identifier
        super().__init__(message)

    @property
    def function_identifier(self):
        return self._function_identifier


class TooManyTypeConstraintsError(FatalFunctionError):
    """Indicate that a bound could not be registered for a function."""

    def __init__(self, function_identifier: str, message: str | None = None):
        super().__init__(
            function_identifier,
            message or f"Too many type constraints for {function_identifier}",
        )


class DuplicateBoundError(TooManyTypeConstraintsError):
    """Indicate that a parameter name was registered twice for a function."""

    def __init__(self, function_identifier: str, parameter_name: str):
        self._parameter_name = parameter_name
        super().__init__(
            function_identifier,
            f"Too many type constraints for {function_identifier}: "
            f"parameter {parameter_name} is already bound",
        )

    @property
    def parameter_name(self):
        return self._parameter_name


class ErrorTypeNotFoundError(FatalFunctionError):
    """Indicate that a completion function lacks a record-typed `error` out parameter."""

    def __init__(self, function_identifier: str):
        super().__init__(
            function_identifier,
            f"Cannot find error type for {function_identifier}",
        )
