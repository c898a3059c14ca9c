import numpy as np
import pytest

from covid_growth.core import DiseaseParameters, Population


@pytest.fixture
def params() -> DiseaseParameters:
    """Default disease parameters."""
    return DiseaseParameters(
        basic_reproduction=1.07,
        incubation_period=5.2,
        infectious_duration=2.9,
        case_fatality_rate=0.02,
    )


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(12345)


@pytest.fixture
def population(params, rng) -> Population:
    """100 people, 10 of them infected."""
    return Population(100, 10, params=params, rng=rng)
