"""YAML configuration loading for netwire.

Brief:
  Reads a YAML document, merges variables from the config file and the
  environment, expands ``${VAR}`` references, and validates the result into a
  NetConfig model.

Inputs:
  - YAML config paths or already-parsed mappings.

Outputs:
  - NetConfig instances.
"""

from __future__ import annotations

import copy
import os
import re
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from .settings import NetConfig

_VAR_PATTERN = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)\}")


def _is_var_key(key: str) -> bool:
    """Brief: Validate whether a string is a supported variable key name.

    Inputs:
      - key: Candidate variable name.

    Outputs:
      - bool: True when the name is ALL_UPPERCASE and matches [A-Z_][A-Z0-9_]*.
    """

    if not key:
        return False
    return bool(re.fullmatch(r"[A-Z_][A-Z0-9_]*", key))


def _parse_yaml_value(text: str) -> Any:
    """Brief: Parse an environment variable value as YAML (falls back to text)."""

    try:
        return yaml.safe_load(text)
    except yaml.YAMLError:
        return text


def merge_variables(
    cfg: Dict[str, Any], *, environ: Optional[Dict[str, str]] = None
) -> Dict[str, Any]:
    """Brief: Merge config-file and environment variables.

    Inputs:
      - cfg: Parsed YAML mapping; its optional 'variables' key is consumed.
      - environ: Environment mapping (defaults to os.environ).

    Outputs:
      - dict: Variable name -> value. Environment overrides the file.

    Example:
      >>> cfg = {'variables': {'PORT': 1}, 'socket': {'backlog': '${PORT}'}}
      >>> merge_variables(cfg, environ={'PORT': '2'})['PORT']
      2
    """

    base = cfg.pop("variables", None)
    if base is None:
        merged: Dict[str, Any] = {}
    elif isinstance(base, dict):
        merged = dict(base)
    else:
        raise ValueError("config.variables must be a mapping when present")

    for k in merged:
        if not isinstance(k, str) or not _is_var_key(k):
            raise ValueError(
                "Invalid variable name %r (must be ALL_UPPERCASE and match [A-Z_][A-Z0-9_]*)"
                % (k,)
            )

    env = os.environ if environ is None else environ
    wanted = _referenced(cfg)
    for k, v in env.items():
        if isinstance(k, str) and _is_var_key(k) and k in wanted:
            merged[k] = _parse_yaml_value(str(v))
    return merged


def _referenced(obj: Any) -> set:
    found: set = set()
    if isinstance(obj, str):
        found.update(_VAR_PATTERN.findall(obj))
    elif isinstance(obj, dict):
        for v in obj.values():
            found |= _referenced(v)
    elif isinstance(obj, list):
        for v in obj:
            found |= _referenced(v)
    return found


def expand_variables(obj: Any, variables: Dict[str, Any]) -> Any:
    """Brief: Replace ``${VAR}`` references inside string values.

    Inputs:
      - obj: Parsed YAML node.
      - variables: Variable mapping.

    Outputs:
      - Any: Expanded copy. A string that is exactly ``${VAR}`` becomes the
        variable's value with its YAML type; embedded references are
        substituted as text. Unknown variables raise ValueError.
    """

    if isinstance(obj, str):
        whole = _VAR_PATTERN.fullmatch(obj)
        if whole:
            name = whole.group(1)
            if name not in variables:
                raise ValueError(f"undefined variable {name!r}")
            return copy.deepcopy(variables[name])

        def _repl(match: re.Match) -> str:
            name = match.group(1)
            if name not in variables:
                raise ValueError(f"undefined variable {name!r}")
            value = variables[name]
            if isinstance(value, bool):
                return "true" if value else "false"
            return str(value)

        return _VAR_PATTERN.sub(_repl, obj)
    if isinstance(obj, dict):
        return {k: expand_variables(v, variables) for k, v in obj.items()}
    if isinstance(obj, list):
        return [expand_variables(v, variables) for v in obj]
    return obj


def parse_config(
    cfg: Dict[str, Any], *, environ: Optional[Dict[str, str]] = None
) -> NetConfig:
    """Brief: Expand variables in a parsed mapping and validate it.

    Inputs:
      - cfg: Parsed YAML mapping (not mutated).
      - environ: Optional environment mapping.

    Outputs:
      - NetConfig.

    Raises:
      - ValueError: Invalid variables or schema validation failure.
    """

    if not isinstance(cfg, dict):
        raise ValueError("Configuration root must be a mapping")
    work = copy.deepcopy(cfg)
    variables = merge_variables(work, environ=environ)
    expanded = expand_variables(work, variables)
    try:
        return NetConfig(**expanded)
    except ValidationError as e:
        raise ValueError(f"invalid configuration: {e}") from e


def parse_config_file(
    config_path: str, *, environ: Optional[Dict[str, str]] = None
) -> NetConfig:
    """Brief: Read, variable-expand and validate a YAML configuration file.

    Inputs:
      - config_path: Path to the YAML file.
      - environ: Optional environment mapping (defaults to os.environ).

    Outputs:
      - NetConfig.

    Raises:
      - ValueError: When the document is not a mapping or fails validation.
      - OSError: When the file cannot be read.
    """

    with open(config_path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}
    return parse_config(cfg, environ=environ)
