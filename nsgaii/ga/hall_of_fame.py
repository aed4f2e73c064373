"""
Maintenance of the hall of fame, the elitist archive of the best individuals
found over a whole run.
"""
import logging
import random
from typing import List, Optional, Sequence

from nsgaii.ga.individual import Individual
from nsgaii.ga.population import HallOfFame, Population
from nsgaii.ga.selection import last_front_selection
from nsgaii.ga.sorting import Comparator, domination_information, non_dominated_compare

logger = logging.getLogger(__name__)


def _unique_by_identity(individuals: Sequence[Individual]) -> List[Individual]:
    seen = set()
    unique = []
    for ind in individuals:
        if id(ind) not in seen:
            seen.add(id(ind))
            unique.append(ind)
    return unique


def _unique_by_genes(individuals: Sequence[Individual]) -> List[Individual]:
    seen_genes = set()
    # genes are opaque, unhashable ones fall back to a linear scan
    seen_unhashable = []
    unique = []
    for ind in individuals:
        try:
            if ind.genes in seen_genes:
                continue
            seen_genes.add(ind.genes)
        except TypeError:
            if ind.genes in seen_unhashable:
                continue
            seen_unhashable.append(ind.genes)
        unique.append(ind)
    return unique


def add_to_hall_of_fame(
    population: Population,
    first_front: Sequence[int],
    hall_of_fame: HallOfFame,
    compare: Comparator = non_dominated_compare,
    rng: Optional[random.Random] = None,
) -> HallOfFame:
    """
    Merges the first front of `population` into the hall of fame and keeps
    only the archive's own non-dominated members.

    The elitist overlap between generations makes the same individuals come
    back; they are dropped by identity first, and members sharing the same
    genes are collapsed to one once the archive's first front is known. When
    the archive has a `max_size` it is then truncated by crowding distance.

    Args:
        population (Population): The sorted population.
        first_front (Sequence[int]): Indices of its first front.
        hall_of_fame (HallOfFame): The archive, updated in place.
        compare (Comparator): The domination comparator.
        rng (Optional[random.Random]): Random source for the truncation,
            required when the archive has a `max_size`.

    Returns:
        HallOfFame: The updated archive.
    """
    if hall_of_fame.max_size is not None and rng is None:
        raise ValueError("a capped hall of fame needs a random source for truncation")

    candidates = list(hall_of_fame.individuals)
    candidates.extend(population.individuals[i] for i in first_front)
    hall_of_fame.individuals = _unique_by_identity(candidates)

    infos = domination_information(hall_of_fame.fitnesses(), compare)
    non_dominated = [
        hall_of_fame.individuals[info.index] for info in infos if info.domination_count == 0
    ]
    hall_of_fame.individuals = _unique_by_genes(non_dominated)
    hall_of_fame.crowding = {}

    if hall_of_fame.max_size is not None and len(hall_of_fame) > hall_of_fame.max_size:
        logger.debug(
            "Truncating hall of fame from %d to %d members",
            len(hall_of_fame), hall_of_fame.max_size,
        )
        kept = last_front_selection(
            hall_of_fame,
            range(len(hall_of_fame)),
            hall_of_fame.max_size,
            rng,
        )
        hall_of_fame.individuals = [hall_of_fame.individuals[i] for i in sorted(kept)]

    return hall_of_fame
