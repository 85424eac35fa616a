"""JSON serialisation of a run report."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

from slnsync import __version__
from slnsync.config import RunResult, UpdateConfig


def build_report(config: UpdateConfig, result: RunResult, total_ms: float) -> dict:
    """Build the report dictionary for a finished run."""
    return {
        "version": "1.0",
        "metadata": {
            "target": str(Path(config.target).resolve()),
            "mode": "update" if config.persist else "validate",
            "filter_conditional": config.filter_conditional,
            "ignore_file": config.ignore_file,
            "ran_at": datetime.now(timezone.utc).isoformat(),
            "slnsync_version": __version__,
            "duration_ms": round(total_ms, 1),
        },
        "stats": {
            "solutions": len(result.solutions),
            "changed": result.changed_count,
            "failed": result.failed_count,
        },
        "changed": list(result.changed),
        "failed": [{"solution": solution, "error": error} for solution, error in result.failed],
    }


def write_output(report: dict, output_path: str) -> None:
    """Write the report to a JSON file."""
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        json.dump(report, f, indent=2, default=str)
