"""
Quality indicators and statistical analysis functions for NSGA-II results.
"""
from typing import List, Tuple, Dict, Any, Optional, Sequence

import numpy as np
from scipy import stats

try:
    # compiled implementation, shipped with most deap wheels
    from deap.tools._hypervolume import hv
except ImportError:
    from deap.tools._hypervolume import pyhv as hv


def hypervolume(
    points: Sequence[Sequence[float]],
    reference: Sequence[float],
    maximize: bool = True,
) -> float:
    """
    Computes the volume dominated by a set of objective vectors and bounded
    by a reference point.

    Points that do not strictly improve on the reference in every objective
    contribute nothing.

    Args:
        points: Objective vectors, all of the reference's length.
        reference: The reference point, worse than every point of interest.
        maximize: Whether objectives are maximized.

    Returns:
        The dominated volume.
    """
    ref = np.asarray(reference, dtype=float)
    if ref.ndim != 1 or len(ref) < 2:
        raise ValueError("hypervolume needs a reference point with at least two objectives")
    if len(points) == 0:
        return 0.0

    arr = np.asarray(points, dtype=float)
    if arr.ndim != 2 or arr.shape[1] != len(ref):
        raise ValueError(
            f"points must have {len(ref)} objectives to match the reference point"
        )

    # deap's hypervolume assumes minimization
    if maximize:
        arr = -arr
        ref = -ref

    arr = arr[(arr < ref).all(axis=1)]
    if len(arr) == 0:
        return 0.0
    return float(hv.hypervolume(arr.tolist(), ref.tolist()))


def compute_confidence_interval(
    values: List[float],
    confidence: float = 0.95
) -> Tuple[float, float, float]:
    """
    Computes the confidence interval for a list of values.

    Args:
        values: List of numeric values.
        confidence: Confidence level (default: 0.95 for 95% CI).

    Returns:
        Tuple of (mean, lower_bound, upper_bound).
    """
    if len(values) < 2:
        mean = float(values[0]) if values else 0.0
        return (mean, mean, mean)

    n = len(values)
    mean = float(np.mean(values))
    std_err = stats.sem(values)  # Standard error of the mean

    # Use t-distribution for small samples
    t_value = stats.t.ppf((1 + confidence) / 2, n - 1)
    margin = t_value * std_err

    return (mean, float(mean - margin), float(mean + margin))


class StatisticalSummary:
    """
    Generates a statistical summary of one metric measured over several runs.
    """

    def __init__(self, values: List[float], metric_name: str = "metric"):
        self.values = values
        self.metric_name = metric_name

    def compute(self) -> Dict[str, Any]:
        """Computes the summary statistics."""
        result: Dict[str, Any] = {
            "metric": self.metric_name,
            "n": len(self.values),
        }

        if not self.values:
            return result

        result["mean"] = float(np.mean(self.values))
        result["std"] = float(np.std(self.values, ddof=1)) if len(self.values) > 1 else 0.0
        result["min"] = float(np.min(self.values))
        result["max"] = float(np.max(self.values))
        result["median"] = float(np.median(self.values))

        mean, ci_lower, ci_upper = compute_confidence_interval(self.values)
        result["ci_95_lower"] = ci_lower
        result["ci_95_upper"] = ci_upper

        return result

    def format_summary(self, summary: Optional[Dict[str, Any]] = None) -> str:
        """Formats the statistical summary as human-readable text."""
        summary = summary or self.compute()
        lines = [f"=== {self.metric_name} ===", f"N = {summary['n']} runs", ""]

        if summary['n'] == 0:
            lines.append("No data available")
            return "\n".join(lines)

        lines.append(f"  Mean:   {summary['mean']:.4f}")
        lines.append(f"  Std:    {summary['std']:.4f}")
        lines.append(f"  95% CI: [{summary['ci_95_lower']:.4f}, {summary['ci_95_upper']:.4f}]")
        lines.append(f"  Range:  [{summary['min']:.4f}, {summary['max']:.4f}]")
        lines.append(f"  Median: {summary['median']:.4f}")

        return "\n".join(lines)
