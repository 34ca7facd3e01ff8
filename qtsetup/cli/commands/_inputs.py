"""Shared input handling for commands."""

import os
from pathlib import Path
from typing import Mapping, Optional

from qtsetup.cli.config import (
    DEFAULT_CONFIG_FILE,
    INPUT_FIELDS,
    build_request,
    load_yaml_config,
    resolve_inputs,
)
from qtsetup.installer.request import InstallRequest


def request_from_args(args, environ: Optional[Mapping[str, str]] = None) -> InstallRequest:
    """
    Build the InstallRequest from parsed arguments, action inputs and config file.

    An explicit --config must exist; the default ./qtsetup.yaml is optional.

    Raises:
        ConfigurationError: If inputs are missing or invalid
    """
    environ = os.environ if environ is None else environ

    if args.config:
        config = load_yaml_config(Path(args.config), required=True)
    else:
        config = load_yaml_config(Path.cwd() / DEFAULT_CONFIG_FILE, required=False)

    cli_values = {field: getattr(args, field, None) for field in INPUT_FIELDS}
    return build_request(resolve_inputs(cli_values, environ, config))
