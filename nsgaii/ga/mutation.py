"""
Mutation operators for the Genetic Algorithm.

A mutation operator perturbs a gene vector given the allele domain:
`mutate(genes, alleles) -> genes`. The builtin operators also take a
keyword-only `rng` so that runs can be reproduced from a seed.
"""
import random
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

MutationOperator = Callable[..., Sequence[Any]]

# Registry for mutation operators
MUTATION_REGISTRY: Dict[str, MutationOperator] = {}


def register_mutation(name: str, func: MutationOperator):
    """
    Registers a new mutation operator.

    Args:
        name (str): The identifier of the operator.
        func (MutationOperator): The operator to register.
    """
    if name in MUTATION_REGISTRY:
        raise ValueError(f"Mutation '{name}' is already registered.")
    MUTATION_REGISTRY[name] = func


def get_mutation(name: str) -> MutationOperator:
    """
    Retrieves a mutation operator from the registry.

    Args:
        name (str): The identifier of the operator.

    Returns:
        MutationOperator: The requested operator.
    """
    if name not in MUTATION_REGISTRY:
        raise ValueError(
            f"Mutation '{name}' is not registered. Available: {list(MUTATION_REGISTRY.keys())}"
        )
    return MUTATION_REGISTRY[name]


def uniform_mutation(
    genes: Sequence[Any],
    alleles: Sequence[Sequence[Any]],
    *,
    rng: Optional[random.Random] = None,
    rate: Optional[float] = None,
) -> Tuple[Any, ...]:
    """
    Redraws genes from their allele domain.

    Each position is redrawn with probability `rate`, 1 / len(genes) by
    default, so one gene changes per call on average.

    Args:
        genes (Sequence[Any]): The gene vector to mutate.
        alleles (Sequence[Sequence[Any]]): Allowed values per position.
        rng (Optional[random.Random]): Random source.
        rate (Optional[float]): Per-gene mutation probability.

    Returns:
        Tuple[Any, ...]: The mutated genes.
    """
    if len(genes) != len(alleles):
        raise ValueError(
            f"allele domain covers {len(alleles)} positions, genes have {len(genes)}"
        )
    rng = rng or random.Random()
    if rate is None:
        rate = 1.0 / len(genes)

    mutated = list(genes)
    for i, domain in enumerate(alleles):
        if rng.random() < rate:
            mutated[i] = rng.choice(list(domain))
    return tuple(mutated)


def swap_mutation(
    genes: Sequence[Any],
    alleles: Sequence[Sequence[Any]],
    *,
    rng: Optional[random.Random] = None,
) -> Tuple[Any, ...]:
    """
    Exchanges two random positions. The allele domain is not consulted, which
    keeps permutation genes valid.
    """
    rng = rng or random.Random()
    mutated = list(genes)
    if len(mutated) < 2:
        return tuple(mutated)

    i, j = rng.sample(range(len(mutated)), 2)
    mutated[i], mutated[j] = mutated[j], mutated[i]
    return tuple(mutated)


# Register the default mutation operators
register_mutation("uniform", uniform_mutation)
register_mutation("swap", swap_mutation)
