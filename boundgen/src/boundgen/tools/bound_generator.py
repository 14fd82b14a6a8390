# SPDX-FileCopyrightText: Copyright (c) 2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

import click
import os
import sys

import yaml

from boundgen.bounds import DEFAULT_UPCAST_IMPORT
from boundgen.callback import (
    DEFAULT_CALLBACK_TEMPLATE,
    DEFAULT_UNIT_TYPE,
    CallbackSynthesizer,
)
from boundgen.catalog import (
    DEFAULT_ASYNC_CALLBACK_CTYPE,
    FunctionCatalog,
    FunctionOverride,
)
from boundgen.classify import DEFAULT_MARSHAL_CALL
from boundgen.function import FunctionBounds, FunctionsAnalyzer
from boundgen.library import Concurrency, Function, Library
from boundgen.parameter import DEFAULT_DESTROY_NOTIFY_CTYPE
from boundgen.renderer import CatalogTypeRenderer
from boundgen.tools.yaml_tags import string_constructor

# Register custom YAML constructor for !join tag
yaml.add_constructor("!boundgen_join", string_constructor)


def _parse_concurrency(value: str, what: str) -> Concurrency:
    try:
        return Concurrency(value)
    except ValueError:
        raise ValueError(
            f"Invalid concurrency policy for {what}: {value!r}. "
            f"Expected one of {[c.value for c in Concurrency]}."
        )


class Config:
    """Configuration File for Bound Analysis.

    Attributes
    ----------
    catalog : str
        Path to the interface-description catalog in YAML format. Required.
    concurrency : Concurrency
        Default concurrency policy of analyzed functions.
    function_concurrency : dict[str, Concurrency]
        Concurrency policies of individual functions, keyed by native
        identifier.
    functions : dict[str, FunctionOverride]
        Per-function overrides: `Use Return For Result` and parameter
        `Nullable` overrides.
    exclude_functions : list[str]
        Native identifiers of functions to exclude from the analysis.
    skip_prefix : str | None
        Do not analyze functions whose identifier starts with this prefix.
        Has no effect if left unspecified.
    output_name : str | None
        The name of the report file, default None. When set to None, use the
        catalog name suffixed with `_bounds.yml`.
    destroy_notify_ctype : str
        Native type label of destructor callbacks.
    async_callback_ctype : str
        Native type label of the completion callback of async functions.
    marshal_call : str
        Extra call emitted for bounded arguments.
    upcast_import : str
        Import contributed by subtype-compatible bounds.
    callback_template : str
        Template of synthesized result callbacks, with `{success}` and
        `{error}` fields.
    unit_type : str
        Success type used when a completion function yields nothing.
    """

    catalog: str
    concurrency: Concurrency
    function_concurrency: dict[str, Concurrency]
    functions: dict[str, FunctionOverride]
    exclude_functions: list[str]
    skip_prefix: str | None
    output_name: str | None
    destroy_notify_ctype: str
    async_callback_ctype: str
    marshal_call: str
    upcast_import: str
    callback_template: str
    unit_type: str

    def __init__(self, config_dict: dict):
        """Initialize Config from a dictionary.

        Parameters
        ----------
        config_dict : dict
            Dictionary containing configuration values.
        """
        if not isinstance(config_dict, dict):
            raise ValueError("Configuration must be a mapping.")
        if "Catalog" not in config_dict:
            raise ValueError("Configuration requires a `Catalog` entry.")

        self.catalog = config_dict["Catalog"]
        self.concurrency = _parse_concurrency(
            config_dict.get("Concurrency", "none"), "Concurrency"
        )
        self.function_concurrency = {
            name: _parse_concurrency(value, name)
            for name, value in (config_dict.get("Function Concurrency") or {}).items()
        }
        self.functions = {
            name: FunctionOverride.from_dict(name, value)
            for name, value in (config_dict.get("Functions") or {}).items()
        }

        self.excludes = config_dict.get("Exclude", {}) or {}
        self.exclude_functions = self.excludes.get("Function", []) or []

        self.skip_prefix = config_dict.get("Skip Prefix", None)
        self.output_name = config_dict.get("Output Name", None)

        self.destroy_notify_ctype = config_dict.get(
            "Destroy Notify C Type", DEFAULT_DESTROY_NOTIFY_CTYPE
        )
        self.async_callback_ctype = config_dict.get(
            "Async Callback C Type", DEFAULT_ASYNC_CALLBACK_CTYPE
        )
        self.marshal_call = config_dict.get("Marshal Call", DEFAULT_MARSHAL_CALL)
        self.upcast_import = config_dict.get("Upcast Import", DEFAULT_UPCAST_IMPORT)
        self.callback_template = config_dict.get(
            "Callback Template", DEFAULT_CALLBACK_TEMPLATE
        )
        self.unit_type = config_dict.get("Unit Type", DEFAULT_UNIT_TYPE)

        self._verify_exists()
        self._verify_callback_template()

    @classmethod
    def from_yaml_path(cls, cfg_path: str) -> "Config":
        """Create a Config instance from a YAML file path.

        Parameters
        ----------
        cfg_path : str
            Path to the YAML configuration file.

        Returns
        -------
        Config
            A new Config instance.
        """
        with open(cfg_path) as f:
            config_dict = yaml.load(f, yaml.Loader)
        return cls(config_dict)

    @classmethod
    def from_params(
        cls,
        catalog: str,
        concurrency: str = "none",
        function_concurrency: dict[str, str] | None = None,
        functions: dict[str, dict] | None = None,
        exclude_functions: list[str] | None = None,
        skip_prefix: str | None = None,
        output_name: str | None = None,
        **target_options: str,
    ) -> "Config":
        """Create a Config instance from individual parameters instead of a config file.

        `target_options` accepts the keys `destroy_notify_ctype`,
        `async_callback_ctype`, `marshal_call`, `upcast_import`,
        `callback_template` and `unit_type`.
        """
        keys = {
            "destroy_notify_ctype": "Destroy Notify C Type",
            "async_callback_ctype": "Async Callback C Type",
            "marshal_call": "Marshal Call",
            "upcast_import": "Upcast Import",
            "callback_template": "Callback Template",
            "unit_type": "Unit Type",
        }
        config_dict = {
            "Catalog": catalog,
            "Concurrency": concurrency,
            "Function Concurrency": function_concurrency or {},
            "Functions": functions or {},
            "Exclude": {"Function": exclude_functions or []},
            "Skip Prefix": skip_prefix,
            "Output Name": output_name,
        }
        for key, value in target_options.items():
            if key not in keys:
                raise ValueError(f"Unknown option: {key}")
            config_dict[keys[key]] = value

        return cls(config_dict)

    def _verify_exists(self):
        if not os.path.exists(self.catalog):
            raise ValueError(f"Catalog file does not exist: {self.catalog}")

    def _verify_callback_template(self):
        try:
            self.callback_template.format(success="", error="")
        except (KeyError, IndexError, ValueError):
            raise ValueError(
                f"Invalid callback template: {self.callback_template}"
            )


def log_functions_to_analyze(functions: list[Function]):
    """Console log the list of functions to analyze."""

    click.echo("-" * 80)
    click.echo(f"Analyzing bounds of {len(functions)} functions.")
    click.echo("Functions: ")
    click.echo("\n".join(f"  - {str(func)}" for func in functions))


def _bound_generator(
    config: Config,
    output_dir: str,
    log_analyzed: bool = False,
    bypass_fatal_error: bool = False,
) -> str:
    """
    Analyze every function of the configured catalog and write a bound report.

    Parameters:
        config (Config): Configuration naming the catalog and analysis options.
        output_dir (str): Directory where the report is written.
        log_analyzed (bool): If True, print the functions that will be analyzed.
        bypass_fatal_error (bool): If True, skip functions whose analysis fails fatally instead of aborting.

    Returns:
        str: Path to the written report.
    """
    library = Library.from_yaml_path(config.catalog)
    catalog = FunctionCatalog(
        library,
        overrides=config.functions,
        async_callback_ctype=config.async_callback_ctype,
    )
    renderer = CatalogTypeRenderer(library)
    synthesizer = CallbackSynthesizer(
        catalog,
        renderer,
        callback_template=config.callback_template,
        unit_type=config.unit_type,
    )

    analyzer = FunctionsAnalyzer(
        catalog,
        renderer,
        excludes=config.exclude_functions,
        skip_prefix=config.skip_prefix,
        concurrency=config.concurrency,
        function_concurrency=config.function_concurrency,
        bypass_fatal_errors=bypass_fatal_error,
        synthesizer=synthesizer,
        destroy_notify_ctype=config.destroy_notify_ctype,
        marshal_call=config.marshal_call,
    )

    if log_analyzed:
        log_functions_to_analyze(analyzer.functions_to_analyze())

    results: list[FunctionBounds] = analyzer.analyze()

    report = {
        "Generator": {
            "Command": " ".join(sys.argv),
            "Catalog": os.path.abspath(config.catalog),
        },
        "Functions": [r.to_dict(config.upcast_import) for r in results],
        "Skipped": dict(analyzer.skipped),
    }

    if config.output_name is None:
        basename = os.path.basename(config.catalog).split(".")[0]
        output_file = os.path.join(output_dir, f"{basename}_bounds.yml")
    else:
        output_file = os.path.join(output_dir, config.output_name)

    with open(output_file, "w") as file:
        yaml.safe_dump(report, file, sort_keys=False)
        click.echo(f"Bounds for {config.catalog} written to {output_file}")

    return output_file


@click.command()
@click.option(
    "--cfg-path",
    type=click.Path(exists=True, dir_okay=False, readable=True),
    required=True,
)
@click.option(
    "--output-dir",
    type=click.Path(
        exists=True,
        file_okay=False,
        writable=True,
    ),
    required=True,
)
@click.option(
    "-noraise",
    "--bypass-fatal-error",
    type=bool,
    default=False,
)
def bound_generator(cfg_path, output_dir, bypass_fatal_error):
    """
    A CLI tool to analyze the generic bounds of the functions of an interface catalog.

    CFG_PATH: Path to the configuration file in YAML format.
    OUTPUT_DIR: Path to the output directory where the report is saved.
    BYPASS_FATAL_ERROR: Skip functions whose analysis fails and continue.
    """
    cfg = Config.from_yaml_path(cfg_path)
    _bound_generator(
        cfg,
        output_dir,
        log_analyzed=True,
        bypass_fatal_error=bypass_fatal_error,
    )
