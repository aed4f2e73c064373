"""
The Results object for storing and analyzing optimization runs.
"""
import os
from typing import List, Dict, Any, Optional

import matplotlib.pyplot as plt
import pandas as pd
from pydantic import BaseModel, ConfigDict, Field

from nsgaii.ga.individual import Individual


class Results(BaseModel):
    """
    Represents the final results of an optimization run.

    Args:
        hall_of_fame (List[Individual]): The non-dominated individuals
            archived over the whole run.
        final_population (List[Individual]): The last generated population.
        history (List[Dict[str, Any]]): One dictionary of statistics per
            generation.
        objectives (List[str]): Display names of the objectives.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    hall_of_fame: List[Individual]
    final_population: List[Individual]
    history: List[Dict[str, Any]] = Field(default_factory=list)
    objectives: List[str] = Field(default_factory=list)

    def objective_names(self, n_objectives: int) -> List[str]:
        """Display names for `n_objectives` objectives, generated when unknown."""
        if len(self.objectives) == n_objectives:
            return list(self.objectives)
        return [f"objective_{i}" for i in range(n_objectives)]

    def to_dataframe(self, which: str = "hall_of_fame") -> pd.DataFrame:
        """
        Tabulates a set of individuals, one row each.

        Args:
            which (str): 'hall_of_fame' or 'final_population'.

        Returns:
            pd.DataFrame: A 'genes' column plus one column per objective.
        """
        if which == "hall_of_fame":
            individuals = self.hall_of_fame
        elif which == "final_population":
            individuals = self.final_population
        else:
            raise ValueError(f"Unknown individual set '{which}'.")

        if not individuals:
            return pd.DataFrame(columns=["genes"])

        names = self.objective_names(len(individuals[0].fitness))
        rows = []
        for ind in individuals:
            row = {"genes": list(ind.genes)}
            row.update(zip(names, ind.fitness))
            rows.append(row)
        return pd.DataFrame(rows)

    def generate_report(self, output_dir: str, objectives: Optional[List[str]] = None):
        """
        Generates a collection of static report files (plots, tables) in the
        specified output directory.
        """
        os.makedirs(output_dir, exist_ok=True)
        if objectives:
            self.objectives = list(objectives)

        # 1. Pareto front plot
        self._plot_pareto_front(output_dir)

        # 2. Convergence plot
        self._plot_convergence(output_dir)

        # 3. Tables
        self.to_dataframe("hall_of_fame").to_csv(
            os.path.join(output_dir, "hall_of_fame.csv"), index=False
        )
        pd.DataFrame(self.history).to_csv(os.path.join(output_dir, "history.csv"), index=False)

    def _plot_pareto_front(self, output_dir: str):
        """Plots the first two objectives of the final population and the hall of fame."""
        if not self.hall_of_fame or len(self.hall_of_fame[0].fitness) < 2:
            return

        names = self.objective_names(len(self.hall_of_fame[0].fitness))
        fig, ax = plt.subplots(figsize=(10, 6))
        if self.final_population:
            ax.scatter(
                [ind.fitness[0] for ind in self.final_population],
                [ind.fitness[1] for ind in self.final_population],
                alpha=0.4, label="Final population",
            )
        ax.scatter(
            [ind.fitness[0] for ind in self.hall_of_fame],
            [ind.fitness[1] for ind in self.hall_of_fame],
            color="red", label="Hall of fame",
        )
        ax.set_xlabel(names[0])
        ax.set_ylabel(names[1])
        ax.set_title("Pareto Front")
        ax.legend()
        ax.grid(True)

        plt.savefig(os.path.join(output_dir, "pareto_front.png"))
        plt.close(fig)

    def _plot_convergence(self, output_dir: str):
        """Plots the hall of fame size over the generations."""
        if not self.history:
            return

        df = pd.DataFrame(self.history)
        if "hall_of_fame_size" not in df.columns:
            return

        fig, ax = plt.subplots(figsize=(10, 6))
        ax.plot(df["generation"], df["hall_of_fame_size"], marker='o', linestyle='-')
        ax.set_xlabel("Generation")
        ax.set_ylabel("Hall of fame size")
        ax.set_title("Convergence")
        ax.grid(True)

        plt.savefig(os.path.join(output_dir, "convergence.png"))
        plt.close(fig)
