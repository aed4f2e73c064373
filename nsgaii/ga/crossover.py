"""
Crossover operators for the Genetic Algorithm.

A crossover operator combines two gene vectors into one offspring gene
vector: `crossover(genes_a, genes_b) -> genes`. The builtin operators also
take a keyword-only `rng` so that runs can be reproduced from a seed.
"""
import random
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

CrossoverOperator = Callable[..., Sequence[Any]]

# Registry for crossover operators
CROSSOVER_REGISTRY: Dict[str, CrossoverOperator] = {}


def register_crossover(name: str, func: CrossoverOperator):
    """
    Registers a new crossover operator.

    Args:
        name (str): The identifier of the operator.
        func (CrossoverOperator): The operator to register.
    """
    if name in CROSSOVER_REGISTRY:
        raise ValueError(f"Crossover '{name}' is already registered.")
    CROSSOVER_REGISTRY[name] = func


def get_crossover(name: str) -> CrossoverOperator:
    """
    Retrieves a crossover operator from the registry.

    Args:
        name (str): The identifier of the operator.

    Returns:
        CrossoverOperator: The requested operator.
    """
    if name not in CROSSOVER_REGISTRY:
        raise ValueError(
            f"Crossover '{name}' is not registered. Available: {list(CROSSOVER_REGISTRY.keys())}"
        )
    return CROSSOVER_REGISTRY[name]


def _check_lengths(genes_a: Sequence[Any], genes_b: Sequence[Any]):
    if len(genes_a) != len(genes_b):
        raise ValueError(
            f"parents must have the same number of genes, got {len(genes_a)} and {len(genes_b)}"
        )


def uniform_crossover(
    genes_a: Sequence[Any],
    genes_b: Sequence[Any],
    *,
    rng: Optional[random.Random] = None,
) -> Tuple[Any, ...]:
    """
    Builds an offspring taking every gene from either parent with equal
    probability.

    Args:
        genes_a (Sequence[Any]): Genes of the first parent.
        genes_b (Sequence[Any]): Genes of the second parent.
        rng (Optional[random.Random]): Random source.

    Returns:
        Tuple[Any, ...]: The offspring genes.
    """
    _check_lengths(genes_a, genes_b)
    rng = rng or random.Random()
    return tuple(a if rng.random() < 0.5 else b for a, b in zip(genes_a, genes_b))


def one_point_crossover(
    genes_a: Sequence[Any],
    genes_b: Sequence[Any],
    *,
    rng: Optional[random.Random] = None,
) -> Tuple[Any, ...]:
    """
    Builds an offspring from the head of the first parent and the tail of
    the second, cut at a random point.
    """
    _check_lengths(genes_a, genes_b)
    rng = rng or random.Random()
    if len(genes_a) < 2:
        return tuple(genes_a)

    point = rng.randint(1, len(genes_a) - 1)
    return tuple(genes_a[:point]) + tuple(genes_b[point:])


# Register the default crossover operators
register_crossover("uniform", uniform_crossover)
register_crossover("one_point", one_point_crossover)
