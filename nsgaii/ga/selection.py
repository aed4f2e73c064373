"""
Selection operators for NSGA-II: crowding distance, last-front truncation and
unique-fitness tournament selection.

Based on:
- Fortin & Parizeau (2013) "Revisiting the NSGA-II crowding-distance
  computation", GECCO '13, pp. 623-630
"""
import random
from typing import Any, List, Sequence, Tuple

from nsgaii.ga.individual import Individual
from nsgaii.ga.population import CrowdingMap, Fitness, Population


def calculate_crowding_distance(
    population: Population,
    front_indices: Sequence[int],
    front_index: int,
) -> CrowdingMap:
    """
    Calculates the crowding distance of every distinct fitness in a front.

    Crowding distance measures how isolated a solution is from its
    neighbours of the same front along each objective. Boundary solutions of
    every objective get an infinite distance so they are always preserved.
    Objectives whose values are all equal on the front add nothing to the
    interior solutions (their range would divide by zero).

    Args:
        population (Population): The population holding the front.
        front_indices (Sequence[int]): Indices of the front's individuals.
        front_index (int): Rank label stored alongside each distance.

    Returns:
        CrowdingMap: fitness -> (front_index, crowding distance).
    """
    if len(front_indices) == 0:
        raise ValueError("cannot compute crowding distance of an empty front")

    fitnesses = list(population.group_by_fitness(front_indices))
    n_objectives = len(fitnesses[0])
    if any(len(fitness) != n_objectives for fitness in fitnesses):
        raise ValueError("fitness vectors of a front must share the same length")

    distances = {fitness: 0.0 for fitness in fitnesses}

    sorted_by_objective: List[List[Fitness]] = []
    objective_range: List[Any] = []
    for obj in range(n_objectives):
        ordered = sorted(fitnesses, key=lambda f: f[obj], reverse=True)
        sorted_by_objective.append(ordered)
        objective_range.append(ordered[0][obj] - ordered[-1][obj])

    for ordered in sorted_by_objective:
        distances[ordered[0]] = float("inf")
        distances[ordered[-1]] = float("inf")

    for obj, ordered in enumerate(sorted_by_objective):
        if objective_range[obj] == 0:
            continue
        for j in range(1, len(ordered) - 1):
            gap = ordered[j - 1][obj] - ordered[j + 1][obj]
            distances[ordered[j]] += gap / objective_range[obj]

    return {fitness: (front_index, distances[fitness]) for fitness in fitnesses}


def last_front_selection(
    population: Population,
    front_indices: Sequence[int],
    to_select: int,
    rng: random.Random,
) -> List[int]:
    """
    Picks exactly `to_select` individuals of one front by crowding distance.

    Individuals of the same front do not dominate each other, so the most
    isolated fitnesses go first. Fitnesses are visited in decreasing crowding
    distance order: a fitness shared by several individuals yields one of
    them at random and stays in rotation, a fitness held by a single
    individual yields it and leaves the rotation. The walk wraps around until
    the quota is met.

    Args:
        population (Population): The population holding the front.
        front_indices (Sequence[int]): Indices of the front's individuals.
        to_select (int): How many to keep, `0 < to_select <= len(front)`.
        rng (random.Random): Random source for the picks among duplicates.

    Returns:
        List[int]: The chosen population indices, all distinct.
    """
    if not 0 < to_select <= len(front_indices):
        raise ValueError(
            f"cannot select {to_select} individuals from a front of {len(front_indices)}"
        )

    crowding = calculate_crowding_distance(population, front_indices, -1)
    members = population.group_by_fitness(front_indices)
    order = sorted(crowding, key=lambda fitness: crowding[fitness][1], reverse=True)

    chosen: List[int] = []
    position = 0
    while len(chosen) < to_select:
        group = members[order[position]]
        if len(group) > 1:
            chosen.append(group.pop(rng.randrange(len(group))))
            position += 1
        else:
            chosen.append(group[0])
            del order[position]

        if position >= len(order):
            position = 0

    return chosen


def select_without_replacement(items: Sequence[Any], k: int, rng: random.Random) -> List[Any]:
    """Draws `k` distinct items in random order."""
    if not 0 <= k <= len(items):
        raise ValueError(f"cannot draw {k} items out of {len(items)}")
    return rng.sample(list(items), k)


def crowded_compare(
    first: Tuple[int, float],
    second: Tuple[int, float],
    rng: random.Random,
) -> int:
    """
    Crowded comparison operator over (rank, crowding distance) pairs.

    Lower rank wins; on equal rank the larger crowding distance wins; a full
    tie is broken uniformly at random.

    Returns:
        int: 0 if `first` wins, 1 if `second` wins.
    """
    if first[1] < 0 or second[1] < 0:
        raise ValueError("crowding distances must be non-negative")
    if first[0] < second[0]:
        return 0
    if first[0] > second[0]:
        return 1
    if first[1] > second[1]:
        return 0
    if first[1] < second[1]:
        return 1
    return rng.randint(0, 1)


def unique_fitness_tournament_selection(
    population: Population,
    rng: random.Random,
) -> List[Individual]:
    """
    Selects as many parents as the population holds with binary tournaments
    run over distinct fitness vectors.

    Tournaments between individuals would favour fitnesses that happen to be
    shared by many individuals; drawing contestants from the set of distinct
    fitnesses removes that bias. Each winning fitness then contributes one
    individual picked at random among those sharing it.

    Args:
        population (Population): Parent pool, its crowding map must cover
            every fitness present.
        rng (random.Random): Random source.

    Returns:
        List[Individual]: The selected parents.
    """
    population_size = len(population)
    groups = population.group_by_fitness()
    fitnesses = list(groups)

    if len(fitnesses) == 1:
        return list(population.individuals)

    missing = [fitness for fitness in fitnesses if fitness not in population.crowding]
    if missing:
        raise ValueError(f"no rank/crowding metadata for fitness {missing[0]}")

    parents: List[Individual] = []
    while len(parents) < population_size:
        k = min(2 * (population_size - len(parents)), len(fitnesses))
        candidates = select_without_replacement(fitnesses, k, rng)

        winners: List[Fitness] = []
        for i in range(0, k - 1, 2):
            offset = crowded_compare(
                population.crowding[candidates[i]],
                population.crowding[candidates[i + 1]],
                rng,
            )
            winners.append(candidates[i + offset])

        for fitness in winners:
            group = groups[fitness]
            parents.append(population.individuals[group[rng.randrange(len(group))]])

    return parents
