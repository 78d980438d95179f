"""Define utility functions for importing planning problems from YAML files."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml


def load_yaml_mapping(yaml_path: Path) -> dict[str, Any]:
    """Load a YAML file whose top-level value is a mapping.

    :param yaml_path: Path to the YAML file to be imported
    :return: Dictionary mapping strings to the loaded values
    :raises FileNotFoundError: If the file doesn't exist
    :raises RuntimeError: If the file isn't valid YAML
    :raises ValueError: If the file doesn't contain a mapping at its top level
    """
    if not yaml_path.exists():
        raise FileNotFoundError(f"Cannot load data from nonexistent YAML file: {yaml_path}")

    try:
        with yaml_path.open() as yaml_file:
            yaml_data = yaml.safe_load(yaml_file)
    except yaml.YAMLError as error:
        raise RuntimeError(f"Failed to load from YAML file: {yaml_path}") from error

    if not isinstance(yaml_data, dict):
        raise ValueError(f"Expected a mapping at the top level of {yaml_path}, got: {yaml_data!r}")

    return yaml_data
