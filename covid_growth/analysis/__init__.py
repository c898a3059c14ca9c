"""Closed-form analytic helpers"""

from .meeting import (
    weekly_meeting_probability,
    cumulative_meeting_probabilities,
    meeting_probability,
    weeks_until_certain,
)

__all__ = [
    'weekly_meeting_probability',
    'cumulative_meeting_probabilities',
    'meeting_probability',
    'weeks_until_certain',
]
