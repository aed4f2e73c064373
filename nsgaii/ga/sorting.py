"""
Domination relation and non-dominated sorting for NSGA-II.
"""
import operator
from concurrent.futures import Executor
from functools import partial
from typing import Any, Callable, List, NamedTuple, Optional, Sequence

from nsgaii.ga.population import Population

Comparator = Callable[[Sequence[Any], Sequence[Any]], int]


def non_dominated_compare(
    a: Sequence[Any],
    b: Sequence[Any],
    better: Callable[[Any, Any], bool] = operator.gt,
) -> int:
    """
    Compares two objective vectors under Pareto domination.

    `a` dominates `b` if it is never worse and strictly better on at least one
    objective. Examples with the default "greater is better" predicate:

        (0, 0, 2) vs (0, 0, 1) ->  1
        (0, 0, 1) vs (0, 1, 0) ->  0
        (1, 0, 1) vs (1, 1, 1) -> -1

    Args:
        a (Sequence[Any]): First objective vector.
        b (Sequence[Any]): Second objective vector.
        better (Callable[[Any, Any], bool]): Per-objective ordering predicate,
            `better(x, y)` is True when x is preferred to y.

    Returns:
        int: 1 if `a` dominates `b`, -1 if `b` dominates `a`, 0 otherwise.

    Raises:
        ValueError: If the vectors differ in length.
    """
    if len(a) != len(b):
        raise ValueError(
            f"objective vectors must be of same length, got {len(a)} and {len(b)}"
        )
    a_dominates = False
    b_dominates = False
    for x, y in zip(a, b):
        if x != y:
            if better(x, y):
                a_dominates = True
            else:
                b_dominates = True
        if a_dominates and b_dominates:
            return 0

    if a_dominates:
        return 1
    if b_dominates:
        return -1
    return 0


def make_comparator(maximize: bool = True) -> Comparator:
    """
    Returns a domination comparator for maximized or minimized objectives.
    """
    if maximize:
        return non_dominated_compare
    return partial(non_dominated_compare, better=operator.lt)


class DominationInfo(NamedTuple):
    """
    Domination bookkeeping for one individual.

    Args:
        index (int): Position of the individual in its population.
        domination_count (int): Number of individuals dominating it.
        dominated_by (List[int]): Ascending indices of those individuals.
        dominates (List[int]): Ascending indices of the individuals it
            dominates.
    """
    index: int
    domination_count: int
    dominated_by: List[int]
    dominates: List[int]


def evaluate_against_others(
    fitnesses: Sequence[Sequence[Any]],
    index: int,
    compare: Comparator = non_dominated_compare,
) -> DominationInfo:
    """
    Compares the fitness at `index` with every other fitness.

    Args:
        fitnesses (Sequence[Sequence[Any]]): Objective vectors of the
            population, in population order.
        index (int): The individual to evaluate.
        compare (Comparator): The domination comparator.

    Returns:
        DominationInfo: Who dominates the individual and whom it dominates.
    """
    own = fitnesses[index]
    dominated_by: List[int] = []
    dominates: List[int] = []
    for other_index, other in enumerate(fitnesses):
        if other_index == index:
            continue
        result = compare(other, own)
        if result == 1:
            dominated_by.append(other_index)
        elif result == -1:
            dominates.append(other_index)
    return DominationInfo(index, len(dominated_by), dominated_by, dominates)


def domination_information(
    fitnesses: Sequence[Sequence[Any]],
    compare: Comparator = non_dominated_compare,
    executor: Optional[Executor] = None,
) -> List[DominationInfo]:
    """
    Runs `evaluate_against_others` for every individual.

    Each individual is handled independently, so the work is mapped over
    `executor` when one is given. Results are returned in index order.
    """
    task = partial(evaluate_against_others, fitnesses, compare=compare)
    indices = range(len(fitnesses))
    if executor is None:
        return [task(i) for i in indices]
    return list(executor.map(task, indices))


def _is_sorted(values: Sequence[int]) -> bool:
    return all(values[i] <= values[i + 1] for i in range(len(values) - 1))


def fast_delete(array: Sequence[int], to_delete: Sequence[int]) -> List[int]:
    """
    Set difference `array - to_delete` for two ascending sequences.

    Walks both sequences once with two cursors, which is linear in their
    combined length.

    Args:
        array (Sequence[int]): Ascending values to filter.
        to_delete (Sequence[int]): Ascending values to remove.

    Returns:
        List[int]: The values of `array` not present in `to_delete`, ascending.

    Raises:
        ValueError: If either input is not sorted ascending.
    """
    if not _is_sorted(array) or not _is_sorted(to_delete):
        raise ValueError("fast_delete requires both inputs sorted ascending")

    result: List[int] = []
    cursor = 0
    n_delete = len(to_delete)
    for value in array:
        while cursor < n_delete and to_delete[cursor] < value:
            cursor += 1
        if cursor < n_delete and to_delete[cursor] == value:
            continue
        result.append(value)
    return result


def non_dominated_sort(
    population: Population,
    compare: Comparator = non_dominated_compare,
    executor: Optional[Executor] = None,
    min_ranked: Optional[float] = None,
) -> List[List[int]]:
    """
    Sorts a population into non-dominated fronts, best to worst.

    Sorting stops as soon as the fronts found so far hold at least
    `min_ranked` individuals, by default half the population: selection never
    needs more than that, and the first front alone feeds the hall of fame.

    Args:
        population (Population): The population to sort.
        compare (Comparator): The domination comparator.
        executor (Optional[Executor]): Used to compute domination counts.
        min_ranked (Optional[float]): Stop once this many individuals are
            ranked. Pass `len(population)` to rank everybody.

    Returns:
        List[List[int]]: Fronts as ascending lists of population indices.
    """
    fitnesses = population.fitnesses()
    if min_ranked is None:
        min_ranked = len(fitnesses) / 2

    remaining = domination_information(fitnesses, compare, executor)
    fronts: List[List[int]] = []
    ranked = 0

    while remaining and ranked < min_ranked:
        front = [info.index for info in remaining if info.domination_count == 0]
        if not front:
            raise ValueError("domination relation has a cycle, no front can be formed")
        fronts.append(front)
        ranked += len(front)

        pruned: List[DominationInfo] = []
        for info in remaining:
            if info.domination_count == 0:
                continue
            dominated_by = fast_delete(info.dominated_by, front)
            pruned.append(info._replace(
                domination_count=len(dominated_by),
                dominated_by=dominated_by,
            ))
        remaining = pruned

    return fronts
