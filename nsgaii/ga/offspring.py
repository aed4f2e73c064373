"""
Offspring generation: applies crossover and mutation to the selected parent
templates to build the next generation.
"""
import random
from concurrent.futures import Executor
from typing import Any, Callable, List, Optional, Sequence, Tuple

from nsgaii.ga.individual import Individual
from nsgaii.ga.population import Population


def generate_offspring(
    templates: Sequence[Individual],
    p_crossover: float,
    p_mutation: float,
    evaluate: Callable[[Tuple[Any, ...]], Sequence[float]],
    alleles: Sequence[Sequence[Any]],
    crossover: Callable[[Sequence[Any], Sequence[Any]], Sequence[Any]],
    mutate: Callable[[Sequence[Any], Sequence[Sequence[Any]]], Sequence[Any]],
    rng: random.Random,
    executor: Optional[Executor] = None,
) -> Population:
    """
    Creates one offspring per template.

    Whether a template recombines and whether it mutates are decided
    independently, all decisions being drawn before any operator runs. A
    recombining template is crossed with another template picked uniformly
    among the others. Only offspring whose genes differ from their template
    are evaluated again; the others keep the template's fitness.

    Args:
        templates (Sequence[Individual]): The selected parents.
        p_crossover (float): Crossover probability per template.
        p_mutation (float): Mutation probability per template.
        evaluate (Callable): Maps a gene tuple to its objective vector.
        alleles (Sequence[Sequence[Any]]): Allele domain given to `mutate`.
        crossover (Callable): `crossover(genes_a, genes_b) -> genes`.
        mutate (Callable): `mutate(genes, alleles) -> genes`.
        rng (random.Random): Random source.
        executor (Optional[Executor]): Evaluates modified offspring in
            parallel when given.

    Returns:
        Population: The offspring, in template order.
    """
    n_templates = len(templates)
    will_recombine = [rng.random() < p_crossover for _ in range(n_templates)]
    will_mutate = [rng.random() < p_mutation for _ in range(n_templates)]

    new_genes: List[Tuple[Any, ...]] = []
    for i, template in enumerate(templates):
        genes = template.genes

        if will_recombine[i] and n_templates > 1:
            # skip over the template itself
            partner = rng.randrange(n_templates - 1)
            if partner >= i:
                partner += 1
            genes = tuple(crossover(genes, templates[partner].genes))

        if will_mutate[i]:
            genes = tuple(mutate(genes, alleles))

        new_genes.append(genes)

    modified = [
        i for i, genes in enumerate(new_genes) if genes != templates[i].genes
    ]
    to_evaluate = [new_genes[i] for i in modified]
    if executor is None:
        fitnesses = [evaluate(genes) for genes in to_evaluate]
    else:
        fitnesses = list(executor.map(evaluate, to_evaluate))

    offspring = [
        Individual(genes=genes, fitness=template.fitness)
        for genes, template in zip(new_genes, templates)
    ]
    for i, fitness in zip(modified, fitnesses):
        offspring[i] = Individual(genes=new_genes[i], fitness=tuple(fitness))

    return Population(individuals=offspring)
