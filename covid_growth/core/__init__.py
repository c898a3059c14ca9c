"""Core epidemic modeling components"""

from .disease_params import DiseaseParameters, DiseaseDistributions, DEFAULT_PARAMS
from .population import Population, Person, DiseaseState
from .seir_model import SEIRSimulator, SimulationConfig, plot_results

__all__ = [
    'DiseaseParameters',
    'DiseaseDistributions',
    'DEFAULT_PARAMS',
    'Population',
    'Person',
    'DiseaseState',
    'SEIRSimulator',
    'SimulationConfig',
    'plot_results'
]
