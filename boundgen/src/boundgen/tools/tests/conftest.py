# SPDX-FileCopyrightText: Copyright (c) 2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

import os
import shutil
import warnings

import pytest
import yaml

from jinja2 import Environment, FileSystemLoader

from click.testing import CliRunner

from boundgen.tools.bound_generator import bound_generator


@pytest.fixture
def run_in_isolated_folder(tmpdir):
    # Helper to simulate a production environment where configurations are used
    # Tmp Folder structure:
    # - /
    # - config/
    #   - <config_name>.yml
    # - output/
    #   - <catalog_name>.yml
    #   - <catalog_name>_bounds.yml
    #
    # Test folder structure:
    # - .
    # - config
    #   - <template_a>.yml.j2
    # - <catalog_a>.yml
    # - test_a.py
    def _run(
        cfg_template,
        catalog,
        params,
        output_name=None,
        bypass_fatal_error=False,
    ):
        root = tmpdir
        config_folder = root.mkdir("config")
        output_folder = root.mkdir("output")
        here = os.path.dirname(os.path.abspath(__file__))

        src_data = os.path.join(here, catalog)
        target_data = os.path.join(output_folder, catalog)
        config_name = cfg_template.replace(".j2", "")
        config_path = os.path.join(config_folder, config_name)
        shutil.copy(src_data, target_data)

        params["data"] = target_data
        params["output_folder"] = str(output_folder)
        if output_name is not None:
            params["output_name"] = output_name

        env = Environment(loader=FileSystemLoader(here))
        template = env.get_template(os.path.join("config/", cfg_template))
        config = template.render(params)

        with open(config_path, "w") as f:
            f.write(config)

        runner = CliRunner(catch_exceptions=False)

        with warnings.catch_warnings(record=True) as w:
            warnings.simplefilter("always")
            result = runner.invoke(
                bound_generator,
                [
                    "--cfg-path",
                    config_path,
                    "--output-dir",
                    str(output_folder),
                    "-noraise",
                    "true" if bypass_fatal_error else "false",
                ],
            )

        assert result.exit_code == 0, result.output

        if output_name is None:
            output_name = catalog.split(".")[0] + "_bounds.yml"
        report_path = os.path.join(output_folder, output_name)

        with open(report_path) as f:
            report = yaml.safe_load(f)

        return {
            "result": result,
            "output_folder": output_folder,
            "report_path": report_path,
            "report": report,
            "functions": {f["function"]: f for f in report["Functions"]},
            "warnings": w,
        }

    return _run
