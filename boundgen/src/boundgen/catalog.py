# SPDX-FileCopyrightText: Copyright (c) 2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

"""Function lookup and the naming conventions of asynchronous functions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable
from warnings import warn

from boundgen.library import (
    Fundamental,
    FundamentalType,
    Function,
    Library,
    Parameter,
    ParameterScope,
)

DEFAULT_ASYNC_CALLBACK_CTYPE = "GAsyncReadyCallback"


@dataclass
class ParameterOverride:
    nullable: bool | None = None


@dataclass
class FunctionOverride:
    """User configuration attached to one function of the catalog."""

    c_identifier: str
    use_return_for_result: bool | None = None
    parameters: dict[str, ParameterOverride] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, c_identifier: str, d: dict[str, Any] | None):
        d = d or {}
        if not isinstance(d, dict):
            raise ValueError(f"Function entry {c_identifier} must be a mapping.")
        parameters = {}
        for name, p in (d.get("Parameters") or {}).items():
            p = p or {}
            if not isinstance(p, dict):
                raise ValueError(
                    f"Parameter entry {name} of {c_identifier} must be a mapping."
                )
            parameters[name] = ParameterOverride(nullable=p.get("Nullable", None))
        return cls(
            c_identifier=c_identifier,
            use_return_for_result=d.get("Use Return For Result", None),
            parameters=parameters,
        )


def derive_completion_name(c_identifier: str) -> str:
    """Name of the function receiving the result of `c_identifier`.

    A trailing `_async` is dropped and `_finish` appended:
    `g_file_read_async` pairs with `g_file_read_finish`.
    """
    if c_identifier.endswith("_async"):
        c_identifier = c_identifier[: -len("_async")]
    return f"{c_identifier}_finish"


def find_ignorable_parameter_index(
    parameters: Iterable[Parameter], ret: Parameter | None = None
) -> int | None:
    """Index of the parameter carrying the length of an array.

    Scans the parameters, then the return value, and answers the
    `array_length` of the first one that declares it.
    """
    candidates = list(parameters)
    if ret is not None:
        candidates.append(ret)
    for param in candidates:
        if param.array_length is not None:
            return int(param.array_length)
    return None


def is_removable_async_param(name: str) -> bool:
    """Whether an async convenience parameter is dropped from the wrapper."""
    return name == "user_data" or name.endswith("data")


class FunctionCatalog:
    """Resolves functions of a `Library` and applies function overrides.

    Parameters
    ----------
    library: Library
        The interface catalog.
    overrides: dict[str, FunctionOverride], Optional
        Configured overrides keyed by native identifier.
    async_callback_ctype: str
        Native type label of the completion callback of async functions.
    """

    def __init__(
        self,
        library: Library,
        overrides: dict[str, FunctionOverride] | None = None,
        async_callback_ctype: str = DEFAULT_ASYNC_CALLBACK_CTYPE,
    ):
        self._library = library
        self._overrides = overrides or {}
        self._async_callback_ctype = async_callback_ctype

    @property
    def library(self) -> Library:
        return self._library

    def find_function(self, c_identifier: str) -> Function | None:
        return self._library.function_by_identifier(c_identifier)

    def derive_completion_name(self, c_identifier: str) -> str:
        return derive_completion_name(c_identifier)

    def find_ignorable_parameter_index(
        self, parameters: Iterable[Parameter], ret: Parameter | None = None
    ) -> int | None:
        return find_ignorable_parameter_index(parameters, ret)

    def is_removable_async_param(self, name: str) -> bool:
        return is_removable_async_param(name)

    def configured_functions(self, c_identifier: str | None) -> list[FunctionOverride]:
        if c_identifier is None or c_identifier not in self._overrides:
            return []
        return [self._overrides[c_identifier]]

    def is_async(self, function: Function) -> bool:
        """Whether `function` follows the asynchronous completion pattern."""
        if function.finish_func is not None:
            return True
        return any(
            p.scope is ParameterScope.async_
            and p.c_type == self._async_callback_ctype
            for p in function.parameters
        )

    def use_return_for_result(
        self,
        function: Function,
        configured_functions: list[FunctionOverride],
    ) -> bool:
        """Whether the return value of a completion function joins its result.

        Configuration wins. Otherwise any return value except none, boolean
        and unsigned int is folded into the result.
        """
        has_return = function.ret.typ != Fundamental.none.value
        for override in configured_functions:
            if override.use_return_for_result is None:
                continue
            if not has_return:
                warn(
                    f"Function {function.c_identifier}: `Use Return For Result` "
                    "is set, but the function has no return value"
                )
                return False
            return override.use_return_for_result

        if not has_return:
            return False
        ret_type = self._library.type_(function.ret.typ)
        if isinstance(ret_type, FundamentalType):
            return ret_type.fundamental not in (
                Fundamental.boolean,
                Fundamental.uint,
            )
        return True
