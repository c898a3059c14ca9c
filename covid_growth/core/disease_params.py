"""
Disease Parameters and Distributions
====================================
Immutable epidemiological parameters and the random draws made from them
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class DiseaseParameters:
    """Core disease parameters for the daily agent model"""

    # Transmission
    basic_reproduction: float = 1.07  # New infections per infectious person over its lifetime

    # Disease progression timings (in days since infection)
    incubation_period: float = 5.2    # Days spent exposed before becoming infectious
    infectious_duration: float = 2.9  # Days spent infectious

    # Outcome
    case_fatality_rate: float = 0.02  # Probability that an infection ends in death

    def __post_init__(self):
        """Reject degenerate rates at configuration time"""
        if self.basic_reproduction < 0:
            raise ValueError(
                f"basic_reproduction must be non-negative, got {self.basic_reproduction}"
            )
        if self.incubation_period < 0:
            raise ValueError(
                f"incubation_period must be non-negative, got {self.incubation_period}"
            )
        if self.infectious_duration <= 0:
            raise ValueError(
                f"infectious_duration must be positive, got {self.infectious_duration}"
            )
        if not 0.0 <= self.case_fatality_rate <= 1.0:
            raise ValueError(
                f"case_fatality_rate must lie in [0, 1], got {self.case_fatality_rate}"
            )

    @property
    def terminal_day(self) -> float:
        """Days since infection after which a person has recovered or died"""
        return self.incubation_period + self.infectious_duration


class DiseaseDistributions:
    """
    Random variable generators for per-person disease characteristics
    """

    def __init__(self, params: DiseaseParameters,
                 seed: Optional[int] = None,
                 rng: Optional[np.random.Generator] = None):
        self.params = params
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    def sample_fatality(self, n: int = 1) -> np.ndarray:
        """
        Sample whether each of n infections would result in death
        Distribution: Bernoulli(case_fatality_rate), independent per person
        """
        return self.rng.random(n) < self.params.case_fatality_rate


# Default parameters instance
DEFAULT_PARAMS = DiseaseParameters()


if __name__ == "__main__":
    params = DiseaseParameters()
    dist = DiseaseDistributions(params, seed=42)

    print("Disease Parameters Test")
    print("=" * 50)
    print(f"Basic reproduction: {params.basic_reproduction:.2f}")
    print(f"Terminal day: {params.terminal_day:.1f}")
    fates = dist.sample_fatality(10000)
    print(f"Sampled fatality rate (10000 draws): {fates.mean():.4f}")
