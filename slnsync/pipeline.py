"""Process discovered solutions on a bounded worker pool."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed

from slnsync.config import RunResult, SolutionOutcome, UpdateConfig
from slnsync.discovery import discover_solutions
from slnsync.errors import SolutionSyncError
from slnsync.updater import update

logger = logging.getLogger(__name__)


def process_solution(solution: str, filter_conditional: bool, persist: bool) -> SolutionOutcome:
    """Update one solution, turning per-solution failures into an outcome."""
    try:
        modified = update(solution, filter_conditional=filter_conditional, persist=persist)
    except (SolutionSyncError, OSError) as e:
        logger.warning(f"Bad solution {solution}: {e}")
        return SolutionOutcome(solution=solution, error=str(e))
    return SolutionOutcome(solution=solution, modified=modified)


def run(config: UpdateConfig, progress_callback=None) -> RunResult:
    """Discover solutions for the configured target and update each of them.

    Args:
        config: Run configuration.
        progress_callback: Optional callable(outcome) invoked as each
            solution finishes. Used by the CLI to report as it goes.

    Workers only return outcomes; the counters live on the calling thread.
    """
    solutions = discover_solutions(config.target, config.ignore_file)
    result = RunResult(solutions=list(solutions))
    if not solutions:
        return result

    workers = max(1, min(config.workers, len(solutions)))
    logger.debug(f"Processing {len(solutions)} solutions with {workers} workers")

    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [
            pool.submit(process_solution, solution, config.filter_conditional, config.persist)
            for solution in solutions
        ]
        for future in as_completed(futures):
            outcome = future.result()
            if outcome.failed:
                result.failed.append((outcome.solution, outcome.error))
            elif outcome.modified:
                result.changed.append(outcome.solution)
            if progress_callback:
                progress_callback(outcome)

    result.changed.sort()
    result.failed.sort()
    return result
