"""
Configuration models for the nsgaii package.

This module defines the Pydantic models for validating and managing a run's
configuration, which is typically loaded from a YAML file.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ProblemConfig(BaseModel):
    """
    Configuration of the problem to optimize.

    Args:
        name (str): The registered problem name (e.g., 'zdt1').
        params (Dict[str, Any]): Keyword arguments for the problem factory
            (e.g., {'n_variables': 10}).
    """
    name: str = Field(..., description="Registered problem name.")
    params: Dict[str, Any] = Field(default_factory=dict, description="Problem factory arguments.")


class GAConfig(BaseModel):
    """
    Configuration for the Genetic Algorithm.

    Args:
        population_size (int): The number of individuals per generation.
        iterations (int): The number of generations to run.
        p_crossover (float): Probability that a parent undergoes crossover.
        p_mutation (float): Probability that a parent undergoes mutation.
        seed (Optional[int]): Seed of the run's random source.
        n_workers (int): Threads used for evaluation and domination counting.
        hall_of_fame_max_size (Optional[int]): Cap on the archive size,
            unbounded when unset.
    """
    population_size: int = Field(..., gt=0, description="Number of individuals per generation.")
    iterations: int = Field(..., gt=0, description="Number of generations to run.")
    p_crossover: float = Field(0.1, ge=0.0, le=1.0, description="Crossover probability.")
    p_mutation: float = Field(0.05, ge=0.0, le=1.0, description="Mutation probability.")
    seed: Optional[int] = Field(None, description="Random seed.")
    n_workers: int = Field(1, ge=1, description="Number of worker threads.")
    hall_of_fame_max_size: Optional[int] = Field(None, gt=0, description="Hall of fame cap.")


class OperatorConfig(BaseModel):
    """
    Configuration of the genetic operators.

    Args:
        crossover (str): The registered crossover name.
        mutation (str): The registered mutation name.
    """
    crossover: str = Field("uniform", description="Registered crossover name.")
    mutation: str = Field("uniform", description="Registered mutation name.")


class Config(BaseModel):
    """
    Top-level configuration object for an optimization run.

    Args:
        problem (ProblemConfig): The problem to optimize.
        ga (GAConfig): Genetic Algorithm configuration.
        operators (OperatorConfig): Genetic operators to use.
        objectives (Optional[List[str]]): Display names of the objectives,
            overriding the problem's own.
    """
    problem: ProblemConfig
    ga: GAConfig
    operators: OperatorConfig = Field(default_factory=OperatorConfig)
    objectives: Optional[List[str]] = None
