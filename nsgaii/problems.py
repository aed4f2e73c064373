"""
Optimization problems for the NSGA-II engine.

A problem bundles what the engine treats as external collaborators: the
allele domain of every gene position and the evaluator mapping genes to an
objective vector. A few classic benchmarks are registered by default.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Sequence, Tuple

import numpy as np


@dataclass
class Problem:
    """
    A multi-objective problem definition.

    Args:
        name (str): The problem identifier.
        alleles (List[List[Any]]): Allowed values per gene position.
        evaluate (Callable): Maps a gene tuple to its objective vector.
        maximize (bool): Whether objectives are maximized (else minimized).
        objectives (List[str]): Display names of the objectives.
    """
    name: str
    alleles: List[List[Any]]
    evaluate: Callable[[Tuple[Any, ...]], Tuple[float, ...]]
    maximize: bool = True
    objectives: List[str] = field(default_factory=list)


# Registry for problem factories
PROBLEM_REGISTRY: Dict[str, Callable[..., Problem]] = {}


def register_problem(name: str, factory: Callable[..., Problem]):
    """
    Registers a new problem factory.

    Args:
        name (str): The name of the problem.
        factory (Callable[..., Problem]): Builds the problem from keyword
            parameters.
    """
    if name in PROBLEM_REGISTRY:
        raise ValueError(f"Problem '{name}' is already registered.")
    PROBLEM_REGISTRY[name] = factory


def get_problem(name: str, **params: Any) -> Problem:
    """
    Builds a registered problem.

    Args:
        name (str): The name of the problem.
        **params: Keyword arguments passed to the problem factory.

    Returns:
        Problem: The requested problem.
    """
    if name not in PROBLEM_REGISTRY:
        raise ValueError(f"Problem '{name}' is not registered. Available: {list(PROBLEM_REGISTRY.keys())}")
    return PROBLEM_REGISTRY[name](**params)


def _grid(low: float, high: float, levels: int) -> List[float]:
    if levels < 2:
        raise ValueError(f"a grid needs at least 2 levels, got {levels}")
    return [float(v) for v in np.linspace(low, high, levels)]


def schaffer(levels: int = 201, bound: float = 10.0) -> Problem:
    """
    Schaffer's problem N.1: one variable x, minimize x^2 and (x - 2)^2.

    The Pareto-optimal set is 0 <= x <= 2.
    """
    def evaluate(genes: Sequence[float]) -> Tuple[float, float]:
        x = genes[0]
        return (x ** 2, (x - 2) ** 2)

    return Problem(
        name="schaffer",
        alleles=[_grid(-bound, bound, levels)],
        evaluate=evaluate,
        maximize=False,
        objectives=["f1", "f2"],
    )


def zdt1(n_variables: int = 30, levels: int = 101) -> Problem:
    """
    ZDT1 (Zitzler, Deb & Thiele 2000) on a discretized [0, 1] grid, both
    objectives minimized. The Pareto front is f2 = 1 - sqrt(f1), reached when
    every variable but the first is 0.
    """
    if n_variables < 2:
        raise ValueError(f"ZDT1 needs at least 2 variables, got {n_variables}")

    def evaluate(genes: Sequence[float]) -> Tuple[float, float]:
        x = np.asarray(genes, dtype=float)
        f1 = x[0]
        g = 1.0 + 9.0 * x[1:].sum() / (len(x) - 1)
        f2 = g * (1.0 - np.sqrt(f1 / g))
        return (float(f1), float(f2))

    return Problem(
        name="zdt1",
        alleles=[_grid(0.0, 1.0, levels) for _ in range(n_variables)],
        evaluate=evaluate,
        maximize=False,
        objectives=["f1", "f2"],
    )


def lotz(n_bits: int = 20) -> Problem:
    """
    Leading Ones Trailing Zeros: maximize the run of ones at the start of a
    bit string and the run of zeros at its end.
    """
    if n_bits < 1:
        raise ValueError(f"LOTZ needs at least 1 bit, got {n_bits}")

    def evaluate(genes: Sequence[int]) -> Tuple[float, float]:
        bits = np.asarray(genes, dtype=int)
        leading_ones = int(np.argmin(bits)) if (bits == 0).any() else len(bits)
        trailing_zeros = int(np.argmax(bits[::-1])) if (bits == 1).any() else len(bits)
        return (float(leading_ones), float(trailing_zeros))

    return Problem(
        name="lotz",
        alleles=[[0, 1] for _ in range(n_bits)],
        evaluate=evaluate,
        maximize=True,
        objectives=["leading_ones", "trailing_zeros"],
    )


# Register the default benchmark problems
register_problem("schaffer", schaffer)
register_problem("zdt1", zdt1)
register_problem("lotz", lotz)
