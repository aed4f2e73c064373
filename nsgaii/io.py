"""
Input/Output operations for the nsgaii package.

This module provides utility functions for loading and saving package
objects, such as configurations and run results.
"""

import yaml
from nsgaii.config import Config
from nsgaii.results import Results


def load_config(path: str) -> Config:
    """
    Loads a YAML configuration file and parses it into a strongly-typed
    Config object.

    Args:
        path (str): The path to the YAML configuration file.

    Returns:
        Config: A Pydantic Config object with the validated configuration.
    """
    with open(path, 'r') as f:
        raw_config = yaml.safe_load(f)
    return Config(**raw_config)


def save_results(results: Results, path: str):
    """
    Writes run results to a JSON file.

    Genes are stored as they are, so they must be JSON serializable.
    """
    with open(path, 'w') as f:
        f.write(results.model_dump_json(indent=2))


def load_results(path: str) -> Results:
    """Reads run results written by `save_results`."""
    with open(path, 'r') as f:
        return Results.model_validate_json(f.read())
