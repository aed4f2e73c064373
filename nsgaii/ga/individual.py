"""
Data structure for representing an individual in the population.
"""
from typing import Any, Callable, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, field_validator


class Individual(BaseModel):
    """
    Represents a single candidate solution: its genes and the objective
    values they score.

    Individuals are immutable. The genes are opaque to the selection engine,
    only the supplied operators and evaluator interpret them.

    Args:
        genes (Tuple[Any, ...]): The ordered gene values.
        fitness (Tuple[float, ...]): The ordered objective values, one per
            optimization criterion.
    """
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    genes: Tuple[Any, ...]
    fitness: Tuple[float, ...]

    @field_validator("genes", "fitness")
    @classmethod
    def _not_empty(cls, value: Tuple[Any, ...]) -> Tuple[Any, ...]:
        if len(value) == 0:
            raise ValueError("vector must not be empty")
        return value

    @classmethod
    def from_evaluator(
        cls,
        genes: Sequence[Any],
        evaluate: Callable[[Tuple[Any, ...]], Sequence[float]],
    ) -> "Individual":
        """
        Creates an Individual whose fitness is computed by `evaluate`.

        Args:
            genes (Sequence[Any]): The gene values.
            evaluate (Callable): Maps a gene tuple to its objective vector.

        Returns:
            Individual: The evaluated individual.
        """
        genes = tuple(genes)
        if not genes:
            raise ValueError("vector must not be empty")
        return cls(genes=genes, fitness=tuple(evaluate(genes)))
