"""
This __init__.py file exposes the public API of the nsgaii package.
"""

from .config import Config
from .io import load_config, load_results, save_results
from .optimizer import Optimizer, run
from .results import Results
from .problems import Problem, get_problem, register_problem
from .ga.crossover import register_crossover
from .ga.individual import Individual
from .ga.mutation import register_mutation
from .ga.population import HallOfFame, Population

__all__ = [
    "Config",
    "load_config",
    "load_results",
    "save_results",
    "Optimizer",
    "run",
    "Results",
    "Problem",
    "get_problem",
    "register_problem",
    "register_crossover",
    "register_mutation",
    "Individual",
    "HallOfFame",
    "Population",
]
