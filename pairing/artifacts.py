"""
Artifact management for matching runs.

Every run writes its outputs as JSON (and the config used as YAML) into a
single output directory so a run can be inspected or diffed later.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

import yaml

from .evaluation import MatchReport

logger = logging.getLogger(__name__)


class ArtifactManager:
    """Writes run outputs below `output_dir`."""

    def __init__(self, output_dir: str):
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def _write_json(self, name: str, data: Any) -> Path:
        filepath = self.output_dir / f"{name}.json"
        with open(filepath, "w") as f:
            json.dump(data, f, indent=2)
        logger.info(f"Saved {name} to {filepath}")
        return filepath

    def save_matches(self, explained_matches: List[Dict[str, Any]]) -> Path:
        return self._write_json("matches", explained_matches)

    def save_unmatched(self, unmatched_ids: List[str]) -> Path:
        return self._write_json("unmatched", unmatched_ids)

    def save_hot_takes(self, hot_takes: Dict[str, List[Dict[str, Any]]]) -> Path:
        return self._write_json("hot_takes", hot_takes)

    def save_report(self, report: MatchReport) -> Path:
        filepath = self.output_dir / "report.json"
        report.save(str(filepath))
        return filepath

    def save_metadata(self, metadata: Dict[str, Any]) -> Path:
        return self._write_json("metadata", metadata)

    def save_yaml_config(self, config: Dict[str, Any], name: str) -> Path:
        filepath = self.output_dir / f"{name}.yaml"
        with open(filepath, "w") as f:
            yaml.safe_dump(config, f, sort_keys=False)
        logger.info(f"Saved config to {filepath}")
        return filepath

    def list_artifacts(self) -> List[str]:
        return sorted(p.name for p in self.output_dir.iterdir() if p.is_file())
