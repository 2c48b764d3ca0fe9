"""
Configuration loading and validation.

This module handles loading of YAML configuration files and
validates that all required fields are present.
"""

import logging
from pathlib import Path
from typing import Dict, Any, List

import yaml

from ..scoring import SCORER_REGISTRY

logger = logging.getLogger(__name__)

REQUIRED_SECTIONS = ["global", "data", "scoring", "matching"]


def load_config(filepath: str) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        filepath: Path to the YAML configuration file

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If the file is empty
        yaml.YAMLError: If YAML is invalid
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {filepath}")

    logger.info(f"Loading configuration from {filepath}")
    with open(filepath, "r") as f:
        config = yaml.safe_load(f)

    if config is None:
        raise ValueError(f"Configuration file is empty: {filepath}")

    return config


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration and return list of warnings/errors.

    Args:
        config: Configuration dictionary

    Returns:
        List of warning/error messages (empty if valid)
    """
    issues = []

    for section in REQUIRED_SECTIONS:
        if section not in config:
            issues.append(f"Missing required section: {section}")

    if "data" in config:
        users = config["data"].get("users", {})
        if "path" not in users:
            issues.append("Missing data.users.path")
        fmt = users.get("format")
        if fmt is not None and fmt not in ("csv", "json"):
            issues.append(f"data.users.format must be 'csv' or 'json', got {fmt}")

    if "scoring" in config:
        strategy = config["scoring"].get("strategy")
        if strategy is None:
            issues.append("Missing scoring.strategy")
        elif strategy not in SCORER_REGISTRY:
            issues.append(f"Unknown scoring.strategy: {strategy}")
        params = config["scoring"].get("params")
        if params is not None and not isinstance(params, dict):
            issues.append("scoring.params must be a mapping")

    if "matching" in config:
        n_jobs = config["matching"].get("n_jobs", 1)
        if not isinstance(n_jobs, int) or n_jobs == 0:
            issues.append(f"matching.n_jobs must be a non-zero integer, got {n_jobs}")

    if "insights" in config:
        top_n = config["insights"].get("top_differences", 3)
        if not isinstance(top_n, int) or top_n < 0:
            issues.append(f"insights.top_differences must be a non-negative integer, got {top_n}")

    if "evaluation" in config:
        n_perm = config["evaluation"].get("stability_permutations", 0)
        if not isinstance(n_perm, int) or n_perm < 0:
            issues.append(f"evaluation.stability_permutations must be >= 0, got {n_perm}")

    # Check random seed is set
    if "global" in config:
        if "random_seed" not in config["global"]:
            issues.append("Missing global.random_seed (required for reproducibility)")

    return issues


def get_config_value(config: Dict[str, Any], path: str, default: Any = None) -> Any:
    """
    Get a nested configuration value using dot notation.

    Args:
        config: Configuration dictionary
        path: Dot-separated path (e.g., "scoring.params.midpoint")
        default: Default value if path doesn't exist

    Returns:
        Configuration value or default
    """
    keys = path.split(".")
    value = config
    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default
    return value
