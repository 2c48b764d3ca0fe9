"""
Main runner for opposition pairing.

This is the single entrypoint for running a complete matching batch.

Usage:
    python -m pairing.run --config configs/config.yaml

The runner performs the following steps:
1. Load and validate configuration
2. Load users (synthetic users are generated if the file is missing)
3. Build the scoring strategy and run greedy matching
4. Compute match insights (top differences, hot takes)
5. Evaluate the run (score distribution, stability across shuffles)
6. Save all artifacts
"""

import argparse
import logging
import sys
from datetime import datetime
from typing import Any, Dict, List, Optional

import numpy as np

from . import __version__
from .entities import User

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def setup_logging(log_level: str) -> None:
    """Configure logging level from config."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.getLogger().setLevel(level)


def run_matching(
    config_path: str,
    users_path: Optional[str] = None,
    scorer_name: Optional[str] = None,
    output_dir: Optional[str] = None
) -> Dict[str, Any]:
    """
    Run a complete matching batch.

    Args:
        config_path: Path to the configuration YAML file
        users_path: If provided, load users from this file instead of config default
        scorer_name: If provided, use this scoring strategy instead of config default
        output_dir: If provided, write artifacts to this directory instead of config default

    Returns:
        Dictionary with run results and paths to artifacts
    """
    from .configs import load_config, validate_config, get_config_value
    from .data_loading import load_users, load_questions
    from .scoring import scorer_from_config
    from .matching import GreedyMatcher, unmatched_users
    from .insights import compute_hot_takes, explain_matches
    from .evaluation import compute_stability_metrics, create_match_report
    from .artifacts import ArtifactManager

    # =========================================================================
    # 1. Load and validate configuration
    # =========================================================================
    logger.info("=" * 60)
    logger.info("OPPOSITION PAIRING RUN")
    logger.info("=" * 60)

    config = load_config(config_path)
    issues = validate_config(config)
    if issues:
        for issue in issues:
            logger.warning(f"Config issue: {issue}")

    setup_logging(get_config_value(config, "global.log_level", "INFO"))

    random_seed = get_config_value(config, "global.random_seed", 42)
    effective_output_dir = output_dir or get_config_value(config, "global.output_dir", "artifacts")
    artifact_manager = ArtifactManager(effective_output_dir)

    # =========================================================================
    # 2. Load data
    # =========================================================================
    logger.info("\n" + "=" * 60)
    logger.info("STEP 1: Loading Users")
    logger.info("=" * 60)

    users_config = get_config_value(config, "data.users", {})
    effective_users_path = users_path or users_config.get("path", "data/users.csv")

    try:
        users = load_users(
            effective_users_path,
            file_format=None if users_path else users_config.get("format"),
            delimiter=users_config.get("delimiter", ","),
            id_column=users_config.get("id_column", "id"),
            opinion_prefix=users_config.get("opinion_prefix", "q")
        )
        synthetic = False
    except FileNotFoundError as e:
        logger.error(f"Users not found: {e}")
        logger.info("Creating synthetic users for demonstration...")
        synthetic_config = config.get("synthetic", {})
        users = create_synthetic_users(
            n_users=synthetic_config.get("n_users", 101),
            n_questions=synthetic_config.get("n_questions", 10),
            scale_min=synthetic_config.get("scale_min", 1),
            scale_max=synthetic_config.get("scale_max", 7),
            random_seed=random_seed
        )
        synthetic = True

    question_texts = None
    questions_path = get_config_value(config, "data.questions.path")
    if questions_path:
        try:
            question_texts = load_questions(questions_path)
        except FileNotFoundError as e:
            logger.warning(f"Question texts unavailable, insights will use indices only: {e}")

    # =========================================================================
    # 3. Match users
    # =========================================================================
    logger.info("\n" + "=" * 60)
    logger.info("STEP 2: Matching Users")
    logger.info("=" * 60)

    scorer = scorer_from_config(config, override_name=scorer_name)
    matcher = GreedyMatcher(scorer, n_jobs=get_config_value(config, "matching.n_jobs", 1))

    matches = matcher.find_matches(users)
    leftover = unmatched_users(users, matches)
    if leftover:
        logger.info(f"Unmatched users: {[user.id for user in leftover]}")

    # =========================================================================
    # 4. Insights
    # =========================================================================
    logger.info("\n" + "=" * 60)
    logger.info("STEP 3: Computing Insights")
    logger.info("=" * 60)

    insights_config = config.get("insights", {})
    explained = explain_matches(
        users,
        matches,
        n_differences=insights_config.get("top_differences", 3),
        question_texts=question_texts
    )

    hot_takes = {
        user.id: [
            take.to_dict()
            for take in compute_hot_takes(
                user,
                midpoint=insights_config.get("midpoint", 4),
                min_intensity=insights_config.get("min_intensity", 2),
                question_texts=question_texts
            )
        ]
        for user in users
    }
    logger.info(f"Computed insights for {len(explained)} matches and {len(hot_takes)} users")

    # =========================================================================
    # 5. Evaluation
    # =========================================================================
    logger.info("\n" + "=" * 60)
    logger.info("STEP 4: Evaluating Run")
    logger.info("=" * 60)

    evaluation_config = config.get("evaluation", {})
    n_permutations = evaluation_config.get("stability_permutations", 0)

    stability = None
    if n_permutations > 0:
        stability = compute_stability_metrics(
            matcher, users,
            n_permutations=n_permutations,
            random_seed=random_seed,
            baseline=matches
        )

    report = create_match_report(
        run_name=scorer.name,
        users=users,
        matches=matches,
        stability_metrics=stability,
        quantiles=evaluation_config.get("quantiles", [0.1, 0.25, 0.5, 0.75, 0.9])
    )
    logger.info("\n" + report.summary())

    # =========================================================================
    # 6. Save artifacts
    # =========================================================================
    artifact_manager.save_matches(explained)
    artifact_manager.save_unmatched([user.id for user in leftover])
    artifact_manager.save_hot_takes(hot_takes)
    artifact_manager.save_report(report)

    metadata = {
        "package_version": __version__,
        "run_timestamp": datetime.now().isoformat(),
        "config_path": config_path,
        "users_path": None if synthetic else effective_users_path,
        "synthetic_users": synthetic,
        "random_seed": random_seed,
        "scoring_strategy": scorer.name,
        "scoring_params": scorer.get_params(),
        "n_users": len(users),
        "n_pairs_scored": len(users) * (len(users) - 1) // 2,
        "n_matches": len(matches)
    }
    artifact_manager.save_metadata(metadata)
    artifact_manager.save_yaml_config(config, "config_used")

    # =========================================================================
    # Summary
    # =========================================================================
    logger.info("\n" + "=" * 60)
    logger.info("RUN COMPLETE")
    logger.info("=" * 60)

    artifacts = artifact_manager.list_artifacts()
    logger.info(f"\nArtifacts saved to {artifact_manager.output_dir}/:")
    for name in artifacts:
        logger.info(f"  - {name}")

    return {
        "success": True,
        "output_dir": str(artifact_manager.output_dir),
        "artifacts": artifacts,
        "matches": matches,
        "report": report,
        "metadata": metadata
    }


def create_synthetic_users(
    n_users: int = 101,
    n_questions: int = 10,
    scale_min: int = 1,
    scale_max: int = 7,
    random_seed: int = 42
) -> List[User]:
    """Create synthetic users with uniform random answers for demonstration."""
    rng = np.random.RandomState(random_seed)
    answers = rng.randint(scale_min, scale_max + 1, size=(n_users, n_questions))

    width = len(str(n_users))
    users = [
        User(id=f"user_{idx + 1:0{width}d}", opinions=row)
        for idx, row in enumerate(answers.tolist())
    ]
    logger.info(f"Created {n_users} synthetic users with {n_questions} questions")
    return users


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the runner."""
    parser = argparse.ArgumentParser(
        description="Pair users with maximally opposing opinions"
    )
    parser.add_argument(
        "--config",
        type=str,
        default="configs/config.yaml",
        help="Path to configuration file"
    )
    parser.add_argument(
        "--users",
        type=str,
        default=None,
        help="Path to users CSV/JSON file (overrides config)"
    )
    parser.add_argument(
        "--scorer",
        type=str,
        default=None,
        help="Scoring strategy name (overrides config)"
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Output directory for artifacts (overrides config)"
    )

    args = parser.parse_args(argv)

    try:
        result = run_matching(
            args.config,
            users_path=args.users,
            scorer_name=args.scorer,
            output_dir=args.output_dir
        )
        if result["success"]:
            logger.info("\nRun completed successfully!")
            return 0
        else:
            logger.error("\nRun failed!")
            return 1
    except Exception as e:
        logger.exception(f"Run failed with error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
