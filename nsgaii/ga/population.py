"""
Population containers and population initialization.

Handles the per-generation population, the long-lived hall of fame archive
and the creation of randomly initialized populations.
"""
import random
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple

from nsgaii.ga.individual import Individual

Fitness = Tuple[float, ...]
CrowdingMap = Dict[Fitness, Tuple[int, float]]


@dataclass
class Population:
    """
    An ordered collection of individuals plus the crowding metadata computed
    for them during selection.

    Duplicated individuals are allowed. The crowding map is keyed by fitness,
    so individuals scoring the same objective values share one
    (rank, crowding distance) entry.
    """

    individuals: List[Individual] = field(default_factory=list)
    crowding: CrowdingMap = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.individuals)

    def __iter__(self) -> Iterator[Individual]:
        return iter(self.individuals)

    def __getitem__(self, idx: int) -> Individual:
        return self.individuals[idx]

    def fitnesses(self) -> List[Fitness]:
        """Fitness vectors of all individuals, in population order."""
        return [ind.fitness for ind in self.individuals]

    def subset(self, indices: Sequence[int]) -> "Population":
        """
        Builds a new population from the individuals at `indices`, sharing a
        copy of this population's crowding metadata.
        """
        return Population(
            individuals=[self.individuals[i] for i in indices],
            crowding=dict(self.crowding),
        )

    def group_by_fitness(
        self, indices: Optional[Sequence[int]] = None
    ) -> Dict[Fitness, List[int]]:
        """
        Groups population indices by their fitness vector.

        Individuals with equal objective values collapse to one key. Keys keep
        the order in which each fitness is first met.

        Args:
            indices (Optional[Sequence[int]]): Indices to group. Defaults to the
                whole population.

        Returns:
            Dict[Fitness, List[int]]: fitness -> indices sharing it.
        """
        if indices is None:
            indices = range(len(self.individuals))
        groups: Dict[Fitness, List[int]] = {}
        for index in indices:
            groups.setdefault(self.individuals[index].fitness, []).append(index)
        return groups

    @classmethod
    def merge(cls, first: "Population", second: "Population") -> "Population":
        """Concatenates two populations. Crowding metadata is not carried over."""
        return cls(individuals=list(first.individuals) + list(second.individuals))


@dataclass
class HallOfFame(Population):
    """
    Long-lived archive of the best individuals seen during a run.

    Members are mutually non-dominated and have distinct genes. The archive is
    only ever extended and then pruned, see
    `nsgaii.ga.hall_of_fame.add_to_hall_of_fame`.

    Args:
        max_size (Optional[int]): When set, the archive is truncated to this
            many members by crowding distance after each update.
    """

    max_size: Optional[int] = None


def random_genes(alleles: Sequence[Sequence[Any]], rng: random.Random) -> Tuple[Any, ...]:
    """
    Draws one gene vector, picking every position uniformly from its allele
    domain.

    Args:
        alleles (Sequence[Sequence[Any]]): Allowed values, one sequence per
            gene position.
        rng (random.Random): Random source.

    Returns:
        Tuple[Any, ...]: The new gene vector.
    """
    if not alleles:
        raise ValueError("allele domain must define at least one gene position")
    genes = []
    for position, domain in enumerate(alleles):
        if len(domain) == 0:
            raise ValueError(f"allele domain for position {position} is empty")
        genes.append(rng.choice(list(domain)))
    return tuple(genes)


def initialize_population(
    initialize: Callable[[], Sequence[Any]],
    evaluate: Callable[[Tuple[Any, ...]], Sequence[float]],
    size: int,
) -> Population:
    """
    Creates a population of `size` freshly initialized and evaluated
    individuals.

    Args:
        initialize (Callable[[], Sequence[Any]]): Produces one gene vector.
        evaluate (Callable): Maps a gene tuple to its objective vector.
        size (int): Number of individuals.

    Returns:
        Population: The new population, without crowding metadata.
    """
    if size <= 0:
        raise ValueError(f"population size must be positive, got {size}")
    population = Population()
    for _ in range(size):
        population.individuals.append(Individual.from_evaluator(initialize(), evaluate))
    return population
