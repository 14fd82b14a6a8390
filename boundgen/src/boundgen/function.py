# SPDX-FileCopyrightText: Copyright (c) 2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

import os
from logging import DEBUG, getLogger, FileHandler
import tempfile
from dataclasses import dataclass, field
from warnings import warn

from boundgen.bounds import DEFAULT_UPCAST_IMPORT, BoundAllocator, CallbackInfo
from boundgen.callback import CallbackSynthesizer
from boundgen.catalog import FunctionCatalog, FunctionOverride
from boundgen.classify import DEFAULT_MARSHAL_CALL
from boundgen.errors import FatalFunctionError
from boundgen.library import Concurrency, Function
from boundgen.parameter import DEFAULT_DESTROY_NOTIFY_CTYPE, ParameterAnalyzer
from boundgen.renderer import TypeRenderer
from boundgen.signature import SignatureRenderer

file_logger = getLogger(f"{__name__}")
logger_path = os.path.join(tempfile.gettempdir(), "boundgen_function.log")
file_logger.debug(f"Function debug outputs are written to {logger_path}")
file_logger.addHandler(FileHandler(logger_path))


@dataclass
class FunctionBounds:
    """Everything the signature emitter needs for one function."""

    function: Function
    allocator: BoundAllocator
    is_async: bool = False
    marshal_calls: dict[str, str | None] = field(default_factory=dict)
    callbacks: list[CallbackInfo] = field(default_factory=list)

    @property
    def callback_info(self) -> CallbackInfo | None:
        """The result callback of an async function, else the first callback."""
        for info in self.callbacks:
            if info.error_type_text:
                return info
        return self.callbacks[0] if self.callbacks else None

    def required_imports(self, upcast_import: str = DEFAULT_UPCAST_IMPORT) -> set[str]:
        return self.allocator.required_imports(upcast_import)

    def to_dict(self, upcast_import: str = DEFAULT_UPCAST_IMPORT) -> dict:
        sig = SignatureRenderer(self.allocator)
        return {
            "function": self.function.c_identifier or self.function.name,
            "async": self.is_async,
            "type_parameters": sig.render_type_parameters(),
            "bounds": [
                {
                    "alias": b.alias,
                    "kind": str(b.kind),
                    "parameter": b.parameter_name,
                    "type": b.rendered_type,
                }
                for b in self.allocator
            ],
            "marshal_calls": {
                k: v for k, v in self.marshal_calls.items() if v is not None
            },
            "callbacks": [
                {
                    "alias": c.bound_alias,
                    "type": c.callback_type_text,
                    "success": c.success_type_text,
                    "error": c.error_type_text,
                }
                for c in self.callbacks
            ],
            "imports": sorted(self.required_imports(upcast_import)),
            "scope_markers": list(self.allocator.iter_scope_markers()),
        }


def analyze_function(
    function: Function,
    catalog: FunctionCatalog,
    renderer: TypeRenderer,
    concurrency: Concurrency = Concurrency.none,
    configured_functions: list[FunctionOverride] | None = None,
    synthesizer: CallbackSynthesizer | None = None,
    destroy_notify_ctype: str = DEFAULT_DESTROY_NOTIFY_CTYPE,
    marshal_call: str = DEFAULT_MARSHAL_CALL,
) -> FunctionBounds:
    """Run the parameter analysis over all parameters of `function`.

    Parameters are visited in declaration order with one fresh
    `BoundAllocator`.

    Raises
    ------
    FatalFunctionError
        When a bound cannot be registered or the completion function of an
        async function has no usable error type.
    """
    if configured_functions is None:
        configured_functions = catalog.configured_functions(function.c_identifier)

    analyzer = ParameterAnalyzer(
        catalog,
        renderer,
        allocator=BoundAllocator(),
        synthesizer=synthesizer,
        destroy_notify_ctype=destroy_notify_ctype,
        marshal_call=marshal_call,
    )
    is_async = catalog.is_async(function)
    result = FunctionBounds(function, analyzer.allocator, is_async=is_async)

    for param in function.parameters:
        marshal, callback_info = analyzer.analyze(
            function, param, is_async, concurrency, configured_functions
        )
        result.marshal_calls[param.name] = marshal
        if callback_info is not None:
            result.callbacks.append(callback_info)

    if file_logger.isEnabledFor(DEBUG):
        file_logger.debug(f"{function}: {result.to_dict()}")
    return result


class FunctionsAnalyzer:
    """Analyze a collection of catalog functions.

    Parameters
    ----------
    catalog: FunctionCatalog
        The function catalog.
    renderer: TypeRenderer
        The type renderer.
    excludes: list[str], Optional
        Native identifiers of functions to leave out.
    skip_prefix: str | None
        Functions whose identifier starts with this prefix are skipped. Has no
        effect if `None` or empty string.
    concurrency: Concurrency
        Default concurrency policy.
    function_concurrency: dict[str, Concurrency], Optional
        Per-function concurrency policies, keyed by native identifier.
    bypass_fatal_errors: bool, default False
        If True, a function failing with a `FatalFunctionError` is skipped
        with a warning instead of aborting the run.
    """

    def __init__(
        self,
        catalog: FunctionCatalog,
        renderer: TypeRenderer,
        excludes: list[str] = [],
        skip_prefix: str | None = None,
        concurrency: Concurrency = Concurrency.none,
        function_concurrency: dict[str, Concurrency] = {},
        bypass_fatal_errors: bool = False,
        synthesizer: CallbackSynthesizer | None = None,
        destroy_notify_ctype: str = DEFAULT_DESTROY_NOTIFY_CTYPE,
        marshal_call: str = DEFAULT_MARSHAL_CALL,
    ):
        self._catalog = catalog
        self._renderer = renderer
        self._excludes = excludes
        self._skip_prefix = skip_prefix
        self._concurrency = concurrency
        self._function_concurrency = function_concurrency
        self._bypass_fatal_errors = bypass_fatal_errors
        self._synthesizer = synthesizer
        self._destroy_notify_ctype = destroy_notify_ctype
        self._marshal_call = marshal_call

        self.skipped: dict[str, str] = {}
        """Functions dropped because of a fatal error, with the message."""

    def _should_skip_function(self, function: Function) -> bool:
        identifier = function.c_identifier or function.name
        if identifier in self._excludes:
            return True
        if self._skip_prefix and identifier.startswith(self._skip_prefix):
            return True
        return False

    def functions_to_analyze(self, functions: list[Function] | None = None):
        if functions is None:
            functions = self._catalog.library.functions
        return [f for f in functions if not self._should_skip_function(f)]

    def analyze(self, functions: list[Function] | None = None) -> list[FunctionBounds]:
        results = []
        for function in self.functions_to_analyze(functions):
            identifier = function.c_identifier or function.name
            try:
                results.append(
                    analyze_function(
                        function,
                        self._catalog,
                        self._renderer,
                        concurrency=self._function_concurrency.get(
                            identifier, self._concurrency
                        ),
                        synthesizer=self._synthesizer,
                        destroy_notify_ctype=self._destroy_notify_ctype,
                        marshal_call=self._marshal_call,
                    )
                )
            except FatalFunctionError as e:
                if not self._bypass_fatal_errors:
                    raise
                warn(f"Skipping function {identifier}: {e}")
                self.skipped[identifier] = str(e)
        return results
