"""Epidemic growth modeling package"""

from . import core
from . import analysis

__all__ = ['core', 'analysis']
