"""
Scorer registry.

Maps the strategy names used in configuration files to ScoringStrategy
classes so the runner can build a scorer from YAML.
"""

import logging
from typing import Any, Dict, Optional, Type

from .strategies import (
    ScoringStrategy,
    SimpleDifferenceScorer,
    EuclideanScorer,
    PolarizationScorer
)

logger = logging.getLogger(__name__)

SCORER_REGISTRY: Dict[str, Type[ScoringStrategy]] = {
    SimpleDifferenceScorer.name: SimpleDifferenceScorer,
    EuclideanScorer.name: EuclideanScorer,
    PolarizationScorer.name: PolarizationScorer,
}


def get_scorer(name: str, **params: Any) -> ScoringStrategy:
    """
    Instantiate a registered scoring strategy.

    Args:
        name: Registry key (e.g. "polarization")
        **params: Constructor arguments for the strategy

    Returns:
        ScoringStrategy instance

    Raises:
        ValueError: If the name is unknown or the parameters are invalid
    """
    if name not in SCORER_REGISTRY:
        raise ValueError(
            f"Unknown scoring strategy: {name} (available: {sorted(SCORER_REGISTRY)})"
        )

    try:
        scorer = SCORER_REGISTRY[name](**params)
    except TypeError as e:
        raise ValueError(f"Invalid parameters for scoring strategy '{name}': {e}") from e

    logger.info(f"Using scoring strategy '{name}' with params {scorer.get_params()}")
    return scorer


def scorer_from_config(config: Dict[str, Any], override_name: Optional[str] = None) -> ScoringStrategy:
    """Create a scorer from the `scoring` section of the main config."""
    scoring_config = config.get("scoring", {})
    name = override_name or scoring_config.get("strategy", SimpleDifferenceScorer.name)
    params = scoring_config.get("params") or {}
    if override_name and override_name != scoring_config.get("strategy"):
        # Params in the config belong to a different strategy
        params = {}
    return get_scorer(name, **params)
