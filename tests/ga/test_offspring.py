"""
Tests for offspring generation.
"""
import random
from concurrent.futures import ThreadPoolExecutor

import pytest

from nsgaii.ga.individual import Individual
from nsgaii.ga.offspring import generate_offspring

ALLELES = [tuple(range(10))] * 3


def evaluate(genes):
    return (float(sum(genes)), float(-max(genes)))


class CountingEvaluator:
    """Records every gene vector it is asked to evaluate."""

    def __init__(self):
        self.calls = []

    def __call__(self, genes):
        self.calls.append(genes)
        return evaluate(genes)


@pytest.fixture
def templates() -> list:
    """
    Five evaluated templates with distinct genes.
    """
    return [Individual.from_evaluator((i, i, i), evaluate) for i in range(5)]


def increment(genes, alleles):
    return tuple((g + 1) % 10 for g in genes)


def keep(genes, alleles):
    return tuple(genes)


def first_parent(a, b):
    return tuple(a)


def test_no_variation_reuses_templates(templates):
    """
    Tests that without crossover and mutation the offspring are copies and
    nothing is evaluated.
    """
    evaluator = CountingEvaluator()
    offspring = generate_offspring(
        templates, 0.0, 0.0, evaluator, ALLELES, first_parent, increment, random.Random(0)
    )

    assert len(offspring) == len(templates)
    assert [ind.genes for ind in offspring] == [t.genes for t in templates]
    assert [ind.fitness for ind in offspring] == [t.fitness for t in templates]
    assert evaluator.calls == []


def test_modified_offspring_are_evaluated(templates):
    """
    Tests that every mutated offspring is evaluated exactly once.
    """
    evaluator = CountingEvaluator()
    offspring = generate_offspring(
        templates, 0.0, 1.0, evaluator, ALLELES, first_parent, increment, random.Random(0)
    )

    assert len(evaluator.calls) == len(templates)
    for template, child in zip(templates, offspring):
        assert child.genes == increment(template.genes, ALLELES)
        assert child.fitness == evaluate(child.genes)


def test_unchanged_genes_are_not_evaluated(templates):
    """
    Tests that operators leaving the genes untouched do not trigger an
    evaluation even when selected.
    """
    evaluator = CountingEvaluator()
    offspring = generate_offspring(
        templates, 1.0, 1.0, evaluator, ALLELES, first_parent, keep, random.Random(0)
    )

    assert evaluator.calls == []
    assert [ind.fitness for ind in offspring] == [t.fitness for t in templates]


def test_crossover_partner_is_another_template(templates):
    """
    Tests that a template is never crossed with itself.
    """
    pairs = []

    def recording_crossover(a, b):
        pairs.append((a, b))
        return tuple(b)

    generate_offspring(
        templates, 1.0, 0.0, evaluate, ALLELES, recording_crossover, keep, random.Random(3)
    )

    assert len(pairs) == len(templates)
    assert all(a != b for a, b in pairs)


def test_single_template_skips_crossover():
    """
    Tests that a lone template cannot recombine.
    """
    template = Individual.from_evaluator((1, 2, 3), evaluate)

    def failing_crossover(a, b):
        raise AssertionError("crossover must not run")

    offspring = generate_offspring(
        [template], 1.0, 0.0, evaluate, ALLELES, failing_crossover, keep, random.Random(0)
    )
    assert offspring.individuals == [template]


def test_evaluator_errors_propagate(templates):
    """
    Tests that an exception raised by the evaluator is not swallowed.
    """
    def broken(genes):
        raise RuntimeError("evaluation failed")

    with pytest.raises(RuntimeError):
        generate_offspring(
            templates, 0.0, 1.0, broken, ALLELES, first_parent, increment, random.Random(0)
        )


def test_executor_gives_same_offspring(templates):
    """
    Tests that evaluating through an executor does not change the result.
    """
    args = (templates, 0.7, 0.5, evaluate, ALLELES)
    sequential = generate_offspring(
        *args, crossover=lambda a, b: tuple(b), mutate=increment, rng=random.Random(12)
    )
    with ThreadPoolExecutor(max_workers=2) as executor:
        parallel = generate_offspring(
            *args, crossover=lambda a, b: tuple(b), mutate=increment,
            rng=random.Random(12), executor=executor,
        )
    assert parallel.individuals == sequential.individuals
