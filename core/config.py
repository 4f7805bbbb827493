"""
Benchmark tuning configuration.

Built-in defaults, optionally overridden by a JSON or YAML file passed with
--config. Values stay plain dicts; sections are merged key by key on top of
the defaults.
"""

import copy
import json
import os

import yaml

from core.errors import ConfigError
from core.reporter import parse_size

DEFAULT_CONFIG = {
    "workdir": ".",
    "write_chunk_size": 1024 * 1024,
    "progress_interval": 256 * 1024 * 1024,
    "calibration": {
        "min_sample_seconds": 0.01,
    },
    "cpu": {
        "target_seconds": 5.0,
        "buffer_size": 32768,
        "warmup_ops": 100,
    },
    "cpu_float": {
        "target_seconds": 5.0,
        "vector_size": 4096,
        "warmup_ops": 100,
    },
    "disk_physical": {
        "path": "templargetestfile",
        "file_size": 8 * 1024 ** 3,
        "chunk_sizes": ["1K", "4K", "16K", "64K", "256K", "1M", "4M"],
        "target_seconds": 5.0,
        "warmup_ops": 100,
    },
    "disk_cache": {
        "path": "temptestfile",
        "file_size": 4 * 1024 ** 2,
        "chunk_sizes": ["1K", "4K", "16K", "64K", "256K"],
        "target_seconds": 2.0,
        "warmup_ops": 128,
    },
}

SECTIONS = ("calibration", "cpu", "cpu_float", "disk_physical", "disk_cache")
SIZE_KEYS = ("buffer_size", "vector_size", "file_size", "write_chunk_size", "progress_interval")


def load_config_file(path):
    """Load a config file (JSON or YAML).

    Auto-detects format by extension (.json, .yaml, .yml) or tries JSON then YAML.

    Returns:
        dict: Parsed config.

    Raises:
        ConfigError on a missing, unreadable or undecodable file, or parse errors.
    """
    if not os.path.isfile(path):
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            raw = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Couldn't read config file {path}: {e}") from e

    ext = os.path.splitext(path)[1].lower()

    if ext == '.json':
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in config file: {e}") from e

    if ext in ('.yaml', '.yml'):
        try:
            return yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in config file: {e}") from e

    # Unknown extension: try JSON, then YAML
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, ValueError):
        pass

    try:
        result = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Could not parse config file as JSON or YAML: {path}") from e
    if isinstance(result, dict):
        return result
    raise ConfigError(f"Could not parse config file as JSON or YAML: {path}")


def _check_positive_number(errors, label, value):
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        errors.append(f"[{label}] must be a positive number (got {value!r})")


def _check_positive_int(errors, label, value):
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        errors.append(f"[{label}] must be a positive integer (got {value!r})")


def _check_size(errors, label, value):
    try:
        size = parse_size(value)
    except (TypeError, ValueError):
        errors.append(f"[{label}] is not a size like 4096, '4K' or '1M' (got {value!r})")
        return
    if size < 1:
        errors.append(f"[{label}] must be positive (got {value!r})")


def validate_config(config):
    """Validate a config dict.

    Returns list of error messages (empty = valid).
    """
    if not isinstance(config, dict):
        return ["Config must be a JSON/YAML object (dict)"]

    errors = []
    known = set(DEFAULT_CONFIG)
    for key in config:
        if key not in known:
            errors.append(f"Unknown config key: '{key}'")

    workdir = config.get("workdir")
    if workdir is not None and not isinstance(workdir, str):
        errors.append(f"[workdir] must be a string (got {workdir!r})")

    for key in ("write_chunk_size", "progress_interval"):
        if key in config:
            _check_size(errors, key, config[key])

    for name in SECTIONS:
        section = config.get(name)
        if section is None:
            continue
        if not isinstance(section, dict):
            errors.append(f"'{name}' must be a dict")
            continue
        for key, value in section.items():
            label = f"{name}.{key}"
            if key not in DEFAULT_CONFIG[name]:
                errors.append(f"Unknown config key: '{label}'")
            elif key in ("target_seconds", "min_sample_seconds"):
                _check_positive_number(errors, label, value)
            elif key == "warmup_ops":
                _check_positive_int(errors, label, value)
            elif key in SIZE_KEYS:
                _check_size(errors, label, value)
            elif key == "path":
                if not isinstance(value, str) or not value:
                    errors.append(f"[{label}] must be a non-empty string (got {value!r})")
            elif key == "chunk_sizes":
                if not isinstance(value, list) or not value:
                    errors.append(f"[{label}] must be a non-empty list")
                else:
                    for i, size in enumerate(value):
                        _check_size(errors, f"{label}[{i}]", size)

    return errors


def merge_config(overrides=None):
    """Merge *overrides* on top of the defaults, section by section.

    Returns:
        dict: Complete config with every size normalized to bytes.
    """
    merged = copy.deepcopy(DEFAULT_CONFIG)
    for key, value in (overrides or {}).items():
        if key in SECTIONS:
            merged[key].update(value)
        else:
            merged[key] = value

    for key in ("write_chunk_size", "progress_interval"):
        merged[key] = parse_size(merged[key])
    for name in SECTIONS:
        section = merged[name]
        for key in SIZE_KEYS:
            if key in section:
                section[key] = parse_size(section[key])
        if "chunk_sizes" in section:
            section["chunk_sizes"] = [parse_size(s) for s in section["chunk_sizes"]]
    return merged


def build_config(path=None, workdir=None):
    """Load, validate and merge the effective config.

    Raises:
        ConfigError: the file is unreadable or fails validation.
    """
    overrides = load_config_file(path) if path else {}
    if overrides is None:
        overrides = {}
    errors = validate_config(overrides)
    if errors:
        raise ConfigError("Config file validation failed", errors)
    config = merge_config(overrides)
    if workdir is not None:
        config["workdir"] = workdir
    return config
