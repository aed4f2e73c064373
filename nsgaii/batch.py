"""
Batch execution for running the same configuration under several seeds.
"""
import logging
import os
from dataclasses import dataclass
from typing import List, Dict, Any, Optional, Sequence

import pandas as pd

from nsgaii.analysis import StatisticalSummary, hypervolume
from nsgaii.config import Config
from nsgaii.optimizer import Optimizer
from nsgaii.results import Results

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Result from a single seeded run."""
    seed: int
    results: Optional[Results]
    maximize: bool = True
    error: Optional[str] = None


class BatchResults:
    """
    Aggregates results from multiple seeded optimization runs.
    """

    def __init__(
        self,
        run_results: List[RunResult],
        config: Config,
        reference: Optional[Sequence[float]] = None,
    ):
        self.run_results = run_results
        self.config = config
        self.reference = reference
        self.successful_runs = [r for r in run_results if r.results is not None]
        self.failed_runs = [r for r in run_results if r.error is not None]

    def per_run_metrics(self) -> List[Dict[str, Any]]:
        """Returns hall of fame size and, with a reference point, hypervolume per run."""
        rows = []
        for run in self.successful_runs:
            row: Dict[str, Any] = {
                "seed": run.seed,
                "hall_of_fame_size": len(run.results.hall_of_fame),
                "evaluations": run.results.history[-1]["evaluations"] if run.results.history else None,
            }
            if self.reference is not None:
                row["hypervolume"] = hypervolume(
                    [ind.fitness for ind in run.results.hall_of_fame],
                    self.reference,
                    maximize=run.maximize,
                )
            rows.append(row)
        return rows

    def aggregate_metrics(self) -> Dict[str, Any]:
        """Computes aggregate statistics across all runs."""
        per_run = self.per_run_metrics()
        result: Dict[str, Any] = {
            "num_runs": len(self.run_results),
            "successful_runs": len(self.successful_runs),
            "failed_runs": len(self.failed_runs),
        }
        if not per_run:
            return result

        result["hall_of_fame_size"] = StatisticalSummary(
            [float(r["hall_of_fame_size"]) for r in per_run], "Hall of fame size"
        ).compute()
        if self.reference is not None:
            result["hypervolume"] = StatisticalSummary(
                [r["hypervolume"] for r in per_run], "Hypervolume"
            ).compute()
        return result

    def generate_batch_report(self, output_dir: str):
        """Generates a report for all batch runs."""
        os.makedirs(output_dir, exist_ok=True)

        # 1. Summary statistics
        agg = self.aggregate_metrics()
        summary_path = os.path.join(output_dir, "batch_summary.txt")
        with open(summary_path, 'w') as f:
            f.write("=== Batch Run Summary ===\n\n")
            f.write(f"Total runs: {agg['num_runs']}\n")
            f.write(f"Successful: {agg['successful_runs']}\n")
            f.write(f"Failed: {agg['failed_runs']}\n\n")

            for key, title in (("hall_of_fame_size", "Hall of fame size"), ("hypervolume", "Hypervolume")):
                if key in agg:
                    f.write(StatisticalSummary([], title).format_summary(agg[key]))
                    f.write("\n\n")

            if self.failed_runs:
                f.write("=== Failed Runs ===\n\n")
                for run in self.failed_runs:
                    f.write(f"Seed {run.seed}: {run.error}\n")

        # 2. Per-run results CSV
        per_run = self.per_run_metrics()
        if per_run:
            pd.DataFrame(per_run).to_csv(os.path.join(output_dir, "per_run_results.csv"), index=False)

        # 3. Individual run reports
        runs_dir = os.path.join(output_dir, "runs")
        for run in self.successful_runs:
            run.results.generate_report(os.path.join(runs_dir, f"seed{run.seed}"))

        logger.info("Batch report generated in '%s'", output_dir)


class BatchRunner:
    """
    Runs one configuration once per seed.
    """

    def __init__(
        self,
        config: Config,
        seeds: Sequence[int],
        reference: Optional[Sequence[float]] = None,
    ):
        self.config = config
        self.seeds = list(seeds)
        self.reference = reference

    def run_single(self, seed: int) -> RunResult:
        """Runs the optimization for a single seed."""
        config = self.config.model_copy(
            update={"ga": self.config.ga.model_copy(update={"seed": seed})}
        )
        optimizer = Optimizer.from_config(config)
        try:
            optimizer.run()
        except Exception as e:
            logger.exception("Run with seed %d failed", seed)
            return RunResult(seed=seed, results=None, maximize=optimizer.maximize, error=str(e))
        return RunResult(seed=seed, results=optimizer.results(), maximize=optimizer.maximize)

    def run_all(self) -> BatchResults:
        """Runs every seed sequentially."""
        logger.info("Batch run: %d seeds", len(self.seeds))
        run_results = []
        for current, seed in enumerate(self.seeds, start=1):
            logger.info("[%d/%d] seed %d", current, len(self.seeds), seed)
            run_results.append(self.run_single(seed))
        return BatchResults(run_results, self.config, self.reference)
