"""
Filter policy loading for the dump splitter.

A policy can come from a YAML file, from command-line flags, or both:

    # policy.yml
    include: [customers, orders]
    exclude_data: [audit_log]
    mode: both

Lists from the file and from the command line are merged; a mode given on the
command line wins over the file.
"""

from pathlib import Path
from typing import Any, Iterable, Optional

import yaml
from pydantic import ValidationError

from .domain.enums import Mode
from .domain.models import FilterPolicy
from .types import ConfigurationError

POLICY_LIST_KEYS = ("include", "exclude", "exclude_data")
POLICY_KEYS = POLICY_LIST_KEYS + ("mode",)


def split_names(values: Optional[Iterable[str]]) -> list[str]:
    """
    Flatten repeated and comma-separated entity name arguments.

    Args:
        values: Raw option values, e.g. ["a,b", "c"]

    Returns:
        Names in order of appearance, blanks dropped
    """
    names: list[str] = []
    for value in values or []:
        for name in str(value).split(","):
            name = name.strip()
            if name:
                names.append(name)
    return names


def load_policy_file(file_path: Path) -> dict[str, Any]:
    """
    Load a YAML policy file.

    Args:
        file_path: Path to YAML file

    Returns:
        Mapping with any of include, exclude, exclude_data, mode

    Raises:
        ConfigurationError: If the file is missing, not valid YAML, or has
            unknown keys or wrongly typed values
    """
    if not file_path.exists():
        raise ConfigurationError(f"Policy file not found: {file_path}")

    try:
        with open(file_path, encoding='utf-8') as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {file_path}: {e}") from e

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Policy file {file_path} must contain a mapping")

    unknown = sorted(set(raw) - set(POLICY_KEYS))
    if unknown:
        raise ConfigurationError(
            f"Unknown keys in policy file {file_path}: {', '.join(unknown)}. "
            f"Allowed: {', '.join(POLICY_KEYS)}"
        )

    policy: dict[str, Any] = {}
    for key in POLICY_LIST_KEYS:
        value = raw.get(key)
        if value is None:
            continue
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, list):
            raise ConfigurationError(f"'{key}' in {file_path} must be a list of names")
        policy[key] = split_names(value)

    if raw.get("mode") is not None:
        policy["mode"] = str(raw["mode"])

    return policy


def build_policy(
    include: Optional[Iterable[str]] = None,
    exclude: Optional[Iterable[str]] = None,
    exclude_data: Optional[Iterable[str]] = None,
    mode: Optional[Mode] = None,
    policy_file: Optional[Path] = None,
) -> FilterPolicy:
    """
    Combine command-line values and an optional policy file into a FilterPolicy.

    Raises:
        ConfigurationError: If the policy file is invalid or the mode unknown
    """
    from_file = load_policy_file(policy_file) if policy_file else {}

    merged = {
        "include": from_file.get("include", []) + split_names(include),
        "exclude": from_file.get("exclude", []) + split_names(exclude),
        "exclude_data": from_file.get("exclude_data", []) + split_names(exclude_data),
        "mode": mode if mode is not None else from_file.get("mode", Mode.BOTH),
    }

    try:
        return FilterPolicy(**merged)
    except ValidationError as e:
        raise ConfigurationError("mode should be one of: data, schema or both") from e
