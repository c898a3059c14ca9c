"""
SEIR Model Simulation Engine
============================
Daily agent-based epidemic runs recorded as a time series
"""

import logging
import numpy as np
from typing import Optional
from dataclasses import dataclass
import pandas as pd

from .disease_params import DiseaseParameters, DEFAULT_PARAMS
from .population import Population, DiseaseState

logger = logging.getLogger(__name__)

# History column -> (plot label, colour)
COMPARTMENTS = {
    'S': ('Susceptible', 'blue'),
    'E': ('Exposed', 'orange'),
    'I': ('Infectious', 'red'),
    'R': ('Recovered', 'green'),
    'D': ('Deceased', 'black'),
}


@dataclass
class SimulationConfig:
    """Configuration for simulation run"""
    population_size: int = 10_000
    initial_infections: int = 10
    group_size: int = 0  # Size of the tracked group
    group_only_susceptible: bool = True
    total_days: int = 120
    seed: Optional[int] = None


class SEIRSimulator:
    """
    Stochastic SEIR epidemic simulator
    Agent-based model tracking each individual, one step per day
    """

    def __init__(self,
                 config: SimulationConfig,
                 disease_params: DiseaseParameters = DEFAULT_PARAMS,
                 rng: Optional[np.random.Generator] = None):
        """
        Initialize simulator

        Args:
            config: Simulation configuration
            disease_params: Disease parameter object
            rng: Random generator; created from config.seed when omitted
        """
        self.config = config
        self.params = disease_params
        self.rng = rng if rng is not None else np.random.default_rng(config.seed)

        self.population = Population(
            config.population_size,
            config.initial_infections,
            params=disease_params,
            rng=self.rng,
        )
        if config.group_size:
            self.population.assign_to_group(
                config.group_size,
                only_susceptible=config.group_only_susceptible,
            )

        # Tracking
        self.current_day = 0
        self.history = []
        self._record_state(new_infections=0)

    def _record_state(self, new_infections: int):
        """Record current state for history"""
        counts = self.population.get_state_counts()

        record = {
            'day': self.current_day,
            'S': counts[DiseaseState.SUSCEPTIBLE],
            'E': counts[DiseaseState.EXPOSED],
            'I': counts[DiseaseState.INFECTIOUS],
            'R': counts[DiseaseState.RECOVERED],
            'D': counts[DiseaseState.DECEASED],
            'infected': self.population.infected_count,
            'new_infections': new_infections,
            'group_infected': self.population.group_infected_count,
            'total': self.population.size
        }

        self.history.append(record)

    def step(self):
        """Execute one simulation time step"""
        new_infections = self.population.advance_time(1)
        self.current_day += 1
        self._record_state(new_infections)
        logger.debug("Day %d: %d new infections, %d ever infected",
                     self.current_day, new_infections, self.history[-1]['infected'])

    def _progress_line(self) -> str:
        row = self.history[-1]
        compartments = ", ".join(f"{key}={row[key]}" for key in COMPARTMENTS)
        return (f"Day {row['day']:3d}: {compartments} "
                f"(+{row['new_infections']} new, {row['infected']} ever infected)")

    def run(self, verbose: bool = False, report_every: int = 30) -> pd.DataFrame:
        """
        Run full simulation

        Args:
            verbose: Print a progress line every report_every days
            report_every: Days between progress lines

        Returns:
            DataFrame with time series of SEIR states
        """
        logger.info("Starting simulation: population=%d, initial=%d, days=%d",
                    self.config.population_size, self.config.initial_infections,
                    self.config.total_days)
        if verbose:
            print(f"Simulating {self.config.total_days} days of {self.population.size} people "
                  f"(R0={self.params.basic_reproduction:.2f})")
            print(self._progress_line())

        for _ in range(self.config.total_days):
            self.step()
            if verbose and self.current_day % report_every == 0:
                print(self._progress_line())

        final = self.history[-1]
        logger.info("Simulation complete: %d ever infected, %d deaths",
                    final['infected'], final['D'])
        if verbose:
            attack_rate = 100 * final['infected'] / self.population.size
            print(f"Done: attack rate {attack_rate:.1f}%, {final['D']} deaths")

        return self.get_results()

    def get_results(self) -> pd.DataFrame:
        """Get results as DataFrame"""
        return pd.DataFrame(self.history)


def plot_results(df: pd.DataFrame, title: str = "Epidemic Growth", group_size: int = 0):
    """
    Plot compartment curves and the growth of the epidemic

    The upper panel shows every compartment over time. The lower panel
    shows the share of the population ever infected, the share of the
    tracked group when group_size is given, and daily new infections as
    bars on a second axis.

    Args:
        df: Results DataFrame from simulation
        title: Plot title
        group_size: Size of the tracked group, 0 when none was tracked
    """
    import matplotlib.pyplot as plt

    fig, (states_ax, growth_ax) = plt.subplots(2, 1, figsize=(12, 10), sharex=True)

    for key, (label, color) in COMPARTMENTS.items():
        style = '--' if key == 'D' else '-'
        states_ax.plot(df['day'], df[key], label=label, color=color, linestyle=style)
    states_ax.set_ylabel('People')
    states_ax.set_title(title, fontweight='bold')
    states_ax.legend(loc='best')
    states_ax.grid(True, alpha=0.3)

    growth_ax.plot(df['day'], 100 * df['infected'] / df['total'],
                   label='Population', color='red')
    if group_size:
        growth_ax.plot(df['day'], 100 * df['group_infected'] / group_size,
                       label='Tracked group', color='purple')
    growth_ax.set_xlabel('Day')
    growth_ax.set_ylabel('Ever infected (%)')
    growth_ax.legend(loc='upper left')
    growth_ax.grid(True, alpha=0.3)

    new_ax = growth_ax.twinx()
    new_ax.bar(df['day'], df['new_infections'], color='gray', alpha=0.4)
    new_ax.set_ylabel('New infections per day')

    fig.tight_layout()
    return fig


if __name__ == "__main__":
    config = SimulationConfig(
        population_size=50000,
        initial_infections=10,
        group_size=45,
        total_days=365,
        seed=42
    )

    simulator = SEIRSimulator(config)
    results = simulator.run(verbose=True)

    import matplotlib.pyplot as plt
    fig = plot_results(results, group_size=config.group_size)
    plt.savefig('epidemic_growth.png', dpi=150, bbox_inches='tight')
    print("Plot saved as 'epidemic_growth.png'")
