"""
Tests for crowding distance, last-front selection and tournament selection.
"""
import math
import random

import pytest

from nsgaii.ga import selection
from nsgaii.ga.individual import Individual
from nsgaii.ga.population import Population

A, B, C, D = (1.0, 5.0), (2.0, 4.0), (3.0, 3.0), (5.0, 1.0)


def make_population(fitnesses) -> Population:
    """Builds a population whose genes are simply the positions."""
    return Population(individuals=[
        Individual(genes=(i,), fitness=fitness) for i, fitness in enumerate(fitnesses)
    ])


@pytest.fixture
def single_front() -> Population:
    """
    Four mutually non-dominated individuals, two objectives to maximize.
    """
    return make_population([A, B, C, D])


def test_crowding_distance_values(single_front):
    """
    Tests the crowding distances of a four member front.

    Both objectives range over 4; B gets 0.5 + 0.5 and C gets 0.75 + 0.75.
    """
    crowding = selection.calculate_crowding_distance(single_front, [0, 1, 2, 3], 0)

    assert crowding[A] == (0, math.inf)
    assert crowding[D] == (0, math.inf)
    assert crowding[B] == (0, pytest.approx(1.0))
    assert crowding[C] == (0, pytest.approx(1.5))


def test_crowding_distance_boundaries_are_infinite():
    """
    Tests that per-objective extremes are always kept with infinite distance.
    """
    rng = random.Random(5)
    population = make_population([(rng.random(), rng.random(), rng.random()) for _ in range(15)])
    indices = list(range(len(population)))
    crowding = selection.calculate_crowding_distance(population, indices, 2)

    for obj in range(3):
        best = max(population.fitnesses(), key=lambda f: f[obj])
        worst = min(population.fitnesses(), key=lambda f: f[obj])
        assert crowding[best][1] == math.inf
        assert crowding[worst][1] == math.inf
    assert all(label == 2 for label, _ in crowding.values())


def test_crowding_distance_constant_objective():
    """
    Tests that an objective with zero range adds nothing to interior points.
    """
    population = make_population([(1.0, 7.0), (2.0, 7.0), (3.0, 7.0), (4.0, 7.0)])
    crowding = selection.calculate_crowding_distance(population, [0, 1, 2, 3], 0)

    assert crowding[(2.0, 7.0)][1] == pytest.approx(2 / 3)
    assert crowding[(3.0, 7.0)][1] == pytest.approx(2 / 3)
    assert not any(math.isnan(d) for _, d in crowding.values())


def test_crowding_distance_groups_equal_fitnesses():
    """
    Tests that individuals sharing a fitness collapse to one entry.
    """
    population = make_population([A, A, B, D, D])
    crowding = selection.calculate_crowding_distance(population, [0, 1, 2, 3, 4], 1)

    assert set(crowding) == {A, B, D}
    assert crowding[B] == (1, pytest.approx(2.0))


def test_crowding_distance_single_fitness():
    """
    Tests that a lone fitness only gets the boundary rule.
    """
    population = make_population([B, B])
    crowding = selection.calculate_crowding_distance(population, [0, 1], 0)
    assert crowding == {B: (0, math.inf)}


def test_crowding_distance_empty_front(single_front):
    """
    Tests that an empty front is rejected.
    """
    with pytest.raises(ValueError):
        selection.calculate_crowding_distance(single_front, [], 0)


def test_last_front_selection_prefers_isolated(single_front):
    """
    Tests that k=3 keeps both boundaries and the more isolated interior point.
    """
    for seed in range(10):
        chosen = selection.last_front_selection(single_front, [0, 1, 2, 3], 3, random.Random(seed))
        assert sorted(chosen) == [0, 2, 3]


@pytest.mark.parametrize("k", [1, 2, 3, 4])
def test_last_front_selection_returns_k_distinct(single_front, k):
    """
    Tests that exactly k distinct indices of the front are returned.
    """
    chosen = selection.last_front_selection(single_front, [0, 1, 2, 3], k, random.Random(0))
    assert len(chosen) == k
    assert len(set(chosen)) == k
    assert set(chosen) <= {0, 1, 2, 3}


@pytest.mark.parametrize("k", [0, -1, 5])
def test_last_front_selection_rejects_bad_quota(single_front, k):
    """
    Tests that quotas outside (0, |front|] are rejected.
    """
    with pytest.raises(ValueError):
        selection.last_front_selection(single_front, [0, 1, 2, 3], k, random.Random(0))


def test_last_front_selection_rotates_duplicates():
    """
    Tests that duplicated fitnesses give one member per visit and stay in
    rotation, so other fitnesses are reached before a duplicate repeats.
    """
    population = make_population([A, A, A, D, B])
    chosen = selection.last_front_selection(population, [0, 1, 2, 3, 4], 3, random.Random(1))

    # A and D are boundaries, B is interior: one A, then D, then B
    assert len(chosen) == 3
    assert sum(1 for i in chosen if population[i].fitness == A) == 1
    assert 3 in chosen
    assert 4 in chosen


def test_last_front_selection_all_duplicates():
    """
    Tests selection when every individual shares the same fitness.
    """
    population = make_population([C] * 6)
    chosen = selection.last_front_selection(population, list(range(6)), 4, random.Random(2))
    assert len(set(chosen)) == 4


def test_select_without_replacement():
    """
    Tests sampling of distinct items.
    """
    items = list(range(10))
    sample = selection.select_without_replacement(items, 4, random.Random(0))
    assert len(set(sample)) == 4
    assert set(sample) <= set(items)
    with pytest.raises(ValueError):
        selection.select_without_replacement(items, 11, random.Random(0))


def test_crowded_compare():
    """
    Tests the crowded comparison operator.
    """
    rng = random.Random(0)
    assert selection.crowded_compare((0, 1.0), (1, 5.0), rng) == 0
    assert selection.crowded_compare((2, 9.0), (1, 0.0), rng) == 1
    assert selection.crowded_compare((1, 2.0), (1, 1.0), rng) == 0
    assert selection.crowded_compare((1, 1.0), (1, math.inf), rng) == 1
    ties = {selection.crowded_compare((1, 1.0), (1, 1.0), rng) for _ in range(50)}
    assert ties == {0, 1}


def test_crowded_compare_rejects_negative_distance():
    """
    Tests that negative crowding distances are rejected.
    """
    with pytest.raises(ValueError):
        selection.crowded_compare((0, -1.0), (0, 1.0), random.Random(0))


def test_tournament_selection_size_and_membership():
    """
    Tests that the tournament returns as many parents as the population holds,
    all drawn from it.
    """
    population = make_population([A, B, C, D, (0.0, 0.0), (0.5, 0.5)])
    population.crowding = {
        A: (0, math.inf), B: (0, 1.0), C: (0, 1.5), D: (0, math.inf),
        (0.5, 0.5): (1, math.inf), (0.0, 0.0): (2, math.inf),
    }
    parents = selection.unique_fitness_tournament_selection(population, random.Random(4))

    assert len(parents) == len(population)
    assert all(p in population.individuals for p in parents)
    # the worst rank can never win a binary tournament
    assert all(p.fitness != (0.0, 0.0) for p in parents)


def test_tournament_selection_single_fitness():
    """
    Tests that a population with one distinct fitness is returned unchanged.
    """
    population = make_population([C, C, C])
    parents = selection.unique_fitness_tournament_selection(population, random.Random(0))
    assert parents == population.individuals


def test_tournament_selection_missing_metadata(single_front):
    """
    Tests that a population without crowding metadata is rejected.
    """
    with pytest.raises(ValueError):
        selection.unique_fitness_tournament_selection(single_front, random.Random(0))


def test_tournament_selection_is_reproducible(single_front):
    """
    Tests that equal seeds give equal parents.
    """
    single_front.crowding = selection.calculate_crowding_distance(single_front, [0, 1, 2, 3], 0)
    first = selection.unique_fitness_tournament_selection(single_front, random.Random(9))
    second = selection.unique_fitness_tournament_selection(single_front, random.Random(9))
    assert first == second
