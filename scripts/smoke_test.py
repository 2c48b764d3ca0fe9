"""
Smoke test for the matching engine.

This script validates that:
1. The configuration loads and validates
2. Every registered scoring strategy drives the matcher without errors
3. Each run matches floor(n/2) pairs with no user matched twice
4. Parallel scoring gives the same matches as sequential scoring

Usage:
    python scripts/smoke_test.py
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import logging

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def run_smoke_test() -> bool:
    """Run smoke tests on the matching engine."""

    logger.info("=" * 60)
    logger.info("SMOKE TEST: Opposition Matching")
    logger.info("=" * 60)

    from pairing.configs import load_config, validate_config
    from pairing.evaluation import match_pair_set
    from pairing.matching import GreedyMatcher
    from pairing.run import create_synthetic_users
    from pairing.scoring import SCORER_REGISTRY, get_scorer

    config_path = project_root / "configs" / "config.yaml"
    config = load_config(str(config_path))
    issues = validate_config(config)
    for issue in issues:
        logger.warning(f"  Config issue: {issue}")

    users = create_synthetic_users(n_users=41, n_questions=8, random_seed=7)
    all_passed = not issues

    for name in sorted(SCORER_REGISTRY):
        logger.info(f"\nStrategy: {name}")
        try:
            matcher = GreedyMatcher(get_scorer(name))
            matches = matcher.find_matches(users)

            matched_ids = [uid for match in matches for uid in match.user_ids]
            ok_count = len(matches) == len(users) // 2
            ok_unique = len(matched_ids) == len(set(matched_ids))

            parallel = GreedyMatcher(get_scorer(name), n_jobs=2).find_matches(users)
            ok_parallel = match_pair_set(parallel) == match_pair_set(matches)

            logger.info(f"  Matches: {len(matches)} (expected {len(users) // 2}) {'OK' if ok_count else 'FAIL'}")
            logger.info(f"  Unique users: {'OK' if ok_unique else 'FAIL'}")
            logger.info(f"  Parallel == sequential: {'OK' if ok_parallel else 'FAIL'}")
            logger.info(f"  Best score: {matches[0].score:.4f}")

            all_passed = all_passed and ok_count and ok_unique and ok_parallel
        except Exception as e:
            logger.error(f"  FAILED: {e}")
            all_passed = False

    logger.info("\n" + "=" * 60)
    logger.info("SMOKE TEST PASSED" if all_passed else "SMOKE TEST FAILED")
    logger.info("=" * 60)
    return all_passed


if __name__ == "__main__":
    sys.exit(0 if run_smoke_test() else 1)
