"""
The NSGA-II generational loop.

Implements the multi-objective genetic algorithm described in:
- Deb, Pratap, Agarwal & Meyarivan (2002) "A fast and elitist multiobjective
  genetic algorithm: NSGA-II", IEEE Transactions on Evolutionary Computation,
  6(2), 182-197
with the crowding-distance computation and unique-fitness tournament of
Fortin & Parizeau (2013), GECCO '13.
"""
import logging
import random
import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from enum import Enum
from functools import partial
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from nsgaii.config import Config
from nsgaii.ga.crossover import get_crossover, one_point_crossover, uniform_crossover
from nsgaii.ga.hall_of_fame import add_to_hall_of_fame
from nsgaii.ga.mutation import get_mutation, swap_mutation, uniform_mutation
from nsgaii.ga.offspring import generate_offspring
from nsgaii.ga.population import HallOfFame, Population, initialize_population, random_genes
from nsgaii.ga.selection import (
    calculate_crowding_distance,
    last_front_selection,
    unique_fitness_tournament_selection,
)
from nsgaii.ga.sorting import make_comparator, non_dominated_sort
from nsgaii.problems import get_problem
from nsgaii.results import Results

logger = logging.getLogger(__name__)

# Operators taking a keyword-only rng
BUILTIN_OPERATORS = (uniform_crossover, one_point_crossover, uniform_mutation, swap_mutation)


class GenerationState(Enum):
    """Phases of the generational loop."""
    INIT = "init"
    SELECT = "select"
    VARY = "vary"
    MERGE = "merge"
    TERMINATE = "terminate"


class _CountingEvaluator:
    """Wraps an evaluator to count its calls, safe across worker threads."""

    def __init__(self, evaluate: Callable[[Tuple[Any, ...]], Sequence[float]]):
        self._evaluate = evaluate
        self._lock = threading.Lock()
        self.calls = 0

    def __call__(self, genes: Tuple[Any, ...]) -> Sequence[float]:
        with self._lock:
            self.calls += 1
        return self._evaluate(genes)


class Optimizer:
    """
    Manages the NSGA-II evolutionary loop.

    Each generation sorts the merged population into fronts, archives the
    first front in the hall of fame, keeps `population_size` parents by rank
    and crowding distance, draws templates by tournament and varies them into
    the next generation. The next merged population joins the new offspring
    with the previous generation.
    """

    def __init__(
        self,
        alleles: Sequence[Sequence[Any]],
        evaluate: Callable[[Tuple[Any, ...]], Sequence[float]],
        population_size: int,
        iterations: int,
        p_crossover: float = 0.1,
        p_mutation: float = 0.05,
        crossover: Optional[Callable[[Sequence[Any], Sequence[Any]], Sequence[Any]]] = None,
        mutate: Optional[Callable[[Sequence[Any], Sequence[Sequence[Any]]], Sequence[Any]]] = None,
        initialize: Optional[Callable[[], Sequence[Any]]] = None,
        maximize: bool = True,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
        hall_of_fame_max_size: Optional[int] = None,
        n_workers: int = 1,
        on_generation: Optional[Callable[[int, Dict[str, Any]], None]] = None,
        objectives: Optional[List[str]] = None,
    ):
        """
        Initializes the Optimizer.

        Args:
            alleles (Sequence[Sequence[Any]]): Allowed values per gene position.
            evaluate (Callable): Maps a gene tuple to its objective vector.
            population_size (int): Individuals kept per generation.
            iterations (int): Number of generations.
            p_crossover (float): Crossover probability per parent.
            p_mutation (float): Mutation probability per parent.
            crossover (Optional[Callable]): `crossover(genes_a, genes_b)`,
                uniform crossover by default.
            mutate (Optional[Callable]): `mutate(genes, alleles)`, uniform
                mutation by default.
            initialize (Optional[Callable]): `initialize() -> genes`, draws
                from `alleles` by default.
            maximize (bool): Whether objectives are maximized.
            seed (Optional[int]): Seed of the run's random source.
            rng (Optional[random.Random]): Random source, takes precedence
                over `seed`.
            hall_of_fame_max_size (Optional[int]): Archive cap, unbounded
                when None.
            n_workers (int): Worker threads for evaluation and domination
                counting; 1 keeps everything in the calling thread.
            on_generation (Optional[Callable]): Called after each generation
                with (generation_number, stats_dict).
            objectives (Optional[List[str]]): Display names of the objectives.
        """
        if population_size <= 0:
            raise ValueError(f"population size must be positive, got {population_size}")
        if iterations <= 0:
            raise ValueError(f"iterations must be positive, got {iterations}")
        for name, p in (("p_crossover", p_crossover), ("p_mutation", p_mutation)):
            if not 0.0 <= p <= 1.0:
                raise ValueError(f"{name} must lie in [0, 1], got {p}")
        if n_workers < 1:
            raise ValueError(f"n_workers must be at least 1, got {n_workers}")

        self.alleles = alleles
        self.evaluate = _CountingEvaluator(evaluate)
        self.population_size = population_size
        self.iterations = iterations
        self.p_crossover = p_crossover
        self.p_mutation = p_mutation
        self.rng = rng if rng is not None else random.Random(seed)
        self.maximize = maximize
        self.compare = make_comparator(maximize)
        self.n_workers = n_workers
        self.on_generation = on_generation
        self.objectives = list(objectives or [])

        self.crossover = self._bind_rng(crossover or uniform_crossover)
        self.mutate = self._bind_rng(mutate or uniform_mutation)
        self.initialize = initialize or partial(random_genes, alleles, rng=self.rng)

        self.state = GenerationState.INIT
        self.hall_of_fame = HallOfFame(max_size=hall_of_fame_max_size)
        self.population: Optional[Population] = None
        self.history: List[Dict[str, Any]] = []

    def _bind_rng(self, operator: Callable) -> Callable:
        """Binds the run's random source to builtin operators."""
        if operator in BUILTIN_OPERATORS:
            return partial(operator, rng=self.rng)
        return operator

    @classmethod
    def from_config(cls, config: Config, **kwargs: Any) -> "Optimizer":
        """
        Builds an Optimizer from a validated configuration.

        Args:
            config (Config): The run configuration.
            **kwargs: Extra constructor arguments (e.g. `on_generation`).

        Returns:
            Optimizer: The configured optimizer.
        """
        problem = get_problem(config.problem.name, **config.problem.params)
        return cls(
            alleles=problem.alleles,
            evaluate=problem.evaluate,
            population_size=config.ga.population_size,
            iterations=config.ga.iterations,
            p_crossover=config.ga.p_crossover,
            p_mutation=config.ga.p_mutation,
            crossover=get_crossover(config.operators.crossover),
            mutate=get_mutation(config.operators.mutation),
            maximize=problem.maximize,
            seed=config.ga.seed,
            hall_of_fame_max_size=config.ga.hall_of_fame_max_size,
            n_workers=config.ga.n_workers,
            objectives=config.objectives or problem.objectives,
            **kwargs,
        )

    def run(self) -> Tuple[HallOfFame, Population]:
        """
        Executes the evolutionary loop.

        Returns:
            Tuple[HallOfFame, Population]: The archive and the last generated
            population.
        """
        logger.info(
            "Starting NSGA-II: population %d, %d generations",
            self.population_size, self.iterations,
        )
        if self.n_workers > 1:
            with ThreadPoolExecutor(max_workers=self.n_workers) as executor:
                return self._loop(executor)
        return self._loop(None)

    def _loop(self, executor: Optional[Executor]) -> Tuple[HallOfFame, Population]:
        self.state = GenerationState.INIT
        kickstart = initialize_population(self.initialize, self.evaluate, self.population_size)
        previous = initialize_population(self.initialize, self.evaluate, self.population_size)
        merged = Population.merge(kickstart, previous)

        for generation in range(self.iterations):
            self.state = GenerationState.SELECT
            fronts = non_dominated_sort(merged, self.compare, executor)
            add_to_hall_of_fame(merged, fronts[0], self.hall_of_fame, self.compare, self.rng)
            parents = self.select(merged, fronts)

            self.state = GenerationState.VARY
            offspring = self.vary(parents, executor)

            self.state = GenerationState.MERGE
            merged = Population.merge(offspring, previous)
            previous = offspring

            stats = self._generation_stats(generation, fronts)
            self.history.append(stats)
            logger.info(
                "Generation %d/%d: %d fronts, first front %d, hall of fame %d, %d evaluations",
                generation + 1, self.iterations, stats["n_fronts"],
                stats["first_front_size"], stats["hall_of_fame_size"], stats["evaluations"],
            )
            if self.on_generation is not None:
                self.on_generation(generation + 1, stats)

        self.state = GenerationState.TERMINATE
        self.population = previous
        return self.hall_of_fame, previous

    def select(self, merged: Population, fronts: List[List[int]]) -> Population:
        """
        Keeps `population_size` individuals of the sorted merged population.

        Whole fronts are accepted while they fit; the front that would
        overflow is truncated by crowding distance. Rank and crowding
        metadata of every kept fitness is stored on the returned population.

        Args:
            merged (Population): The merged population.
            fronts (List[List[int]]): Its fronts, best first.

        Returns:
            Population: The parent pool.
        """
        crowding = {}
        if len(fronts[0]) >= self.population_size:
            logger.debug("First front holds %d individuals, truncating it", len(fronts[0]))
            crowding.update(calculate_crowding_distance(merged, fronts[0], 0))
            chosen = last_front_selection(merged, fronts[0], self.population_size, self.rng)
        else:
            accepted, last_front = fronts[:-1], fronts[-1]
            last_rank = len(fronts) - 1
            chosen = []
            for rank, front in enumerate(accepted):
                crowding.update(calculate_crowding_distance(merged, front, rank))
                chosen.extend(front)

            to_select = self.population_size - len(chosen)
            from_last = last_front_selection(merged, last_front, to_select, self.rng)
            crowding.update(calculate_crowding_distance(merged, from_last, last_rank))
            chosen.extend(from_last)

        parents = merged.subset(chosen)
        parents.crowding = crowding
        return parents

    def vary(self, parents: Population, executor: Optional[Executor] = None) -> Population:
        """Tournament selection followed by offspring generation."""
        templates = unique_fitness_tournament_selection(parents, self.rng)
        return generate_offspring(
            templates,
            self.p_crossover,
            self.p_mutation,
            self.evaluate,
            self.alleles,
            self.crossover,
            self.mutate,
            self.rng,
            executor,
        )

    def _generation_stats(self, generation: int, fronts: List[List[int]]) -> Dict[str, Any]:
        """Compute statistics for the generation just completed."""
        stats: Dict[str, Any] = {
            "generation": generation,
            "n_fronts": len(fronts),
            "first_front_size": len(fronts[0]),
            "hall_of_fame_size": len(self.hall_of_fame),
            "evaluations": self.evaluate.calls,
        }
        if len(self.hall_of_fame):
            n_objectives = len(self.hall_of_fame[0].fitness)
            names = self.objectives if len(self.objectives) == n_objectives else [
                f"objective_{i}" for i in range(n_objectives)
            ]
            pick = max if self.maximize else min
            for i, name in enumerate(names):
                stats[f"best_{name}"] = pick(ind.fitness[i] for ind in self.hall_of_fame)
        return stats

    def results(self) -> Results:
        """
        Packages the state of a completed run.

        Returns:
            Results: Hall of fame, final population and history.
        """
        if self.population is None:
            raise ValueError("the optimizer has not been run yet")
        return Results(
            hall_of_fame=list(self.hall_of_fame.individuals),
            final_population=list(self.population.individuals),
            history=list(self.history),
            objectives=self.objectives,
        )


def run(
    alleles: Sequence[Sequence[Any]],
    evaluate: Callable[[Tuple[Any, ...]], Sequence[float]],
    population_size: int,
    iterations: int,
    p_crossover: float = 0.1,
    p_mutation: float = 0.05,
    crossover: Optional[Callable[[Sequence[Any], Sequence[Any]], Sequence[Any]]] = None,
    mutate: Optional[Callable[[Sequence[Any], Sequence[Sequence[Any]]], Sequence[Any]]] = None,
    **kwargs: Any,
) -> Tuple[HallOfFame, Population]:
    """
    Runs NSGA-II and returns the hall of fame and the last generated
    population.

    Extra keyword arguments (`initialize`, `maximize`, `seed`, `rng`,
    `hall_of_fame_max_size`, `n_workers`, `on_generation`) are passed to
    `Optimizer`.
    """
    optimizer = Optimizer(
        alleles,
        evaluate,
        population_size,
        iterations,
        p_crossover=p_crossover,
        p_mutation=p_mutation,
        crossover=crossover,
        mutate=mutate,
        **kwargs,
    )
    return optimizer.run()
