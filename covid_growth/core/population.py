"""
Population Management
====================
Fixed-size, well-mixed population of agents and the daily transmission rule
"""

import logging
import numpy as np
from dataclasses import dataclass
from typing import Optional, Dict, List
from enum import IntEnum

from .disease_params import DiseaseParameters, DiseaseDistributions, DEFAULT_PARAMS

logger = logging.getLogger(__name__)


class DiseaseState(IntEnum):
    """Enumeration of disease states"""
    SUSCEPTIBLE = 0
    EXPOSED = 1
    INFECTIOUS = 2
    RECOVERED = 3
    DECEASED = 4


@dataclass
class Person:
    """Individual agent in the simulation"""
    id: int

    # Fate decided once at creation
    will_die: bool = False

    # Disease state
    state: DiseaseState = DiseaseState.SUSCEPTIBLE
    days_since_infection: Optional[int] = None  # None while susceptible

    # Accounting
    has_transmitted: bool = False
    in_group: bool = False

    @property
    def ever_infected(self) -> bool:
        return self.state > DiseaseState.SUSCEPTIBLE

    def infect(self):
        """Infect directly, skipping the exposed phase"""
        self.state = DiseaseState.INFECTIOUS
        self.days_since_infection = 0

    def expose(self):
        """Start a latent period; not used by the transmission rule"""
        self.state = DiseaseState.EXPOSED
        self.days_since_infection = 0

    def mark_transmitted(self):
        if not self.has_transmitted and self.state != DiseaseState.INFECTIOUS:
            raise ValueError(
                f"person {self.id} cannot transmit while {self.state.name}"
            )
        self.has_transmitted = True

    def join_group(self):
        self.in_group = True

    def advance_day(self, params: DiseaseParameters):
        """
        Count one more day since infection and re-derive the state from it

        The state is a pure function of the elapsed days and ``will_die``:
        exposed before the incubation period ends, infectious for the
        infectious duration after that, then recovered or deceased.
        Susceptible people are left untouched.
        """
        if self.days_since_infection is None:
            return

        self.days_since_infection += 1
        days = self.days_since_infection

        if days < params.incubation_period:
            self.state = DiseaseState.EXPOSED
        elif days < params.terminal_day:
            self.state = DiseaseState.INFECTIOUS
        elif self.will_die:
            self.state = DiseaseState.DECEASED
        else:
            self.state = DiseaseState.RECOVERED


class Population:
    """
    Owns every person of a closed, well-mixed population and steps it in time
    """

    def __init__(self,
                 size: int,
                 initial_infected: int,
                 params: DiseaseParameters = DEFAULT_PARAMS,
                 seed: Optional[int] = None,
                 rng: Optional[np.random.Generator] = None):
        """
        Initialize population

        Args:
            size: Total population size
            initial_infected: Number of people infected at construction
            params: Disease parameters shared by every person
            seed: Random seed for reproducibility (ignored when rng is given)
            rng: Random generator to draw from; takes precedence over seed
        """
        if size < 1:
            raise ValueError(f"population size must be positive, got {size}")
        if not 0 <= initial_infected <= size:
            raise ValueError(
                f"initial_infected must lie in [0, {size}], got {initial_infected}"
            )

        self.size = size
        self.params = params
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.distributions = DiseaseDistributions(params, rng=self.rng)

        self.people = self._initialize_people()
        self._expose_random(initial_infected)
        logger.debug("Seeded %d infections in a population of %d",
                     initial_infected, size)

    def _initialize_people(self) -> List[Person]:
        """Create all individuals with their fate already drawn"""
        fates = self.distributions.sample_fatality(self.size)
        return [Person(id=i, will_die=bool(fate)) for i, fate in enumerate(fates)]

    def _sample_eligible(self, candidates: List[Person], count: int,
                         what: str) -> List[Person]:
        """Uniformly draw count distinct people from candidates"""
        if count < 0:
            raise ValueError(f"cannot select a negative number of people ({count})")
        if count > len(candidates):
            raise ValueError(
                f"requested {count} {what} people but only {len(candidates)} are eligible"
            )
        if count == 0:
            return []
        picks = self.rng.choice(len(candidates), size=count, replace=False)
        return [candidates[i] for i in picks]

    def assign_to_group(self, count: int, only_susceptible: bool = True):
        """
        Mark count distinct people as members of the tracked group

        Args:
            count: Number of people to mark
            only_susceptible: Draw only from currently susceptible people;
                otherwise anyone may be drawn. Existing members stay eligible.
        """
        if only_susceptible:
            candidates = self.get_susceptible()
        else:
            candidates = self.people

        for person in self._sample_eligible(candidates, count, "group"):
            person.join_group()

    def _expose_random(self, count: int) -> int:
        """Infect count distinct susceptible people"""
        chosen = self._sample_eligible(self.get_susceptible(), count, "susceptible")
        for person in chosen:
            person.infect()
        return len(chosen)

    def advance_time(self, days: int) -> int:
        """
        Run the daily update rule for a number of days

        Each day every ever-infected person advances one day. Infectious
        people that have not transmitted yet then generate
        round(transmitters * basic_reproduction) new infections among the
        susceptible, and are marked as having transmitted afterwards. When
        fewer susceptible people remain than requested, all of them are
        infected.

        Returns:
            Number of new infections caused during these days
        """
        if days < 0:
            raise ValueError(f"days must be non-negative, got {days}")

        new_infections = 0
        for _ in range(days):
            once_infected = self.get_ever_infected()
            for person in once_infected:
                person.advance_day(self.params)

            transmitters = [p for p in once_infected
                            if p.state == DiseaseState.INFECTIOUS and not p.has_transmitted]
            new_exposures = int(np.floor(len(transmitters) * self.params.basic_reproduction + 0.5))

            remaining = self.size - len(once_infected)
            if new_exposures > remaining:
                logger.debug("Susceptible pool exhausted: %d requested, %d left",
                             new_exposures, remaining)
                new_exposures = remaining

            new_infections += self._expose_random(new_exposures)

            for person in transmitters:
                person.mark_transmitted()

        return new_infections

    @property
    def infected_count(self) -> int:
        """Number of people that have ever been infected"""
        return len(self.get_ever_infected())

    @property
    def group_infected_count(self) -> int:
        """Number of group members that have ever been infected"""
        return sum(1 for p in self.people if p.in_group and p.ever_infected)

    def get_state_counts(self) -> Dict[DiseaseState, int]:
        """Count people in each disease state"""
        counts = {state: 0 for state in DiseaseState}
        for person in self.people:
            counts[person.state] += 1
        return counts

    def get_susceptible(self) -> List[Person]:
        """Get all susceptible individuals"""
        return [p for p in self.people if p.state == DiseaseState.SUSCEPTIBLE]

    def get_ever_infected(self) -> List[Person]:
        """Get everyone who is no longer susceptible"""
        return [p for p in self.people if p.ever_infected]

    def get_group_members(self) -> List[Person]:
        return [p for p in self.people if p.in_group]

    def summary(self) -> str:
        """Return population summary statistics"""
        summary = f"Population Summary\n"
        summary += f"=" * 50 + "\n"
        summary += f"Total size: {self.size}\n"
        summary += f"Ever infected: {self.infected_count}\n"
        summary += f"Group members: {len(self.get_group_members())}"
        summary += f" ({self.group_infected_count} infected)\n\n"

        summary += f"State distribution:\n"
        for state, count in self.get_state_counts().items():
            pct = 100 * count / self.size
            summary += f"  {state.name:12s}: {count:6d} ({pct:5.1f}%)\n"

        return summary


if __name__ == "__main__":
    pop = Population(size=10000, initial_infected=10, seed=42)
    pop.assign_to_group(45)
    pop.advance_time(60)
    print(pop.summary())
