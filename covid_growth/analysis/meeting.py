"""
Group Meeting Probability
=========================
Closed-form chance that someone in a healthy group A meets someone in a
growing infected group B within a fixed, well-mixed population

Assumes a constant population size and a steady weekly growth of group B.
Recovery and mortality are not considered; results are indicative only.
"""

import numpy as np


def _validate(group_a: float, group_b: float, population: float,
              contacts_per_week: float):
    if group_a < 0 or group_b < 0:
        raise ValueError(f"group sizes must be non-negative, got {group_a} and {group_b}")
    if population <= 0:
        raise ValueError(f"population must be positive, got {population}")
    if contacts_per_week < 0:
        raise ValueError(f"contacts_per_week must be non-negative, got {contacts_per_week}")
    if group_a + int(contacts_per_week) >= population:
        raise ValueError(
            f"group A ({group_a}) and its weekly contacts ({int(contacts_per_week)}) "
            f"must leave room in a population of {population}"
        )


def weekly_meeting_probability(group_a: float,
                               group_b: float,
                               population: float,
                               contacts_per_week: float) -> float:
    """
    Probability that group A meets group B within one week

    The chance they never meet is the product of

         k-b-a-i
        ---------    for i = 0 .. z
          k-a-i

    with k the population, a and b the group sizes and z the number of
    unique people met per week. Factors are clipped to [0, 1], so a group B
    that fills the rest of the population makes a meeting certain.
    Group A and its contacts must fit inside the population.
    """
    _validate(group_a, group_b, population, contacts_per_week)

    i = np.arange(int(contacts_per_week) + 1, dtype=float)
    denominator = population - group_a - i
    numerator = denominator - group_b
    never_meet = np.prod(np.clip(numerator / denominator, 0.0, 1.0))
    return float(1.0 - never_meet)


def cumulative_meeting_probabilities(group_a: float,
                                     group_b: float,
                                     growth_factor: float,
                                     population: float,
                                     weeks: int,
                                     contacts_per_week: float) -> np.ndarray:
    """
    Probability of a meeting by the end of each week

    Week w (counting from 0) uses a group B of size b × d^w. Weeks combine
    as independent events: P ← P + m - m × P.

    Returns:
        Array of length `weeks`; element w is the probability after w+1 weeks
    """
    if weeks < 1:
        raise ValueError(f"weeks must be at least 1, got {weeks}")
    if growth_factor <= 0:
        raise ValueError(f"growth_factor must be positive, got {growth_factor}")

    cumulative = np.empty(weeks)
    probability = 0.0
    current_b = group_b
    for week in range(weeks):
        meet = weekly_meeting_probability(group_a, current_b, population, contacts_per_week)
        probability += meet - meet * probability
        cumulative[week] = probability
        # group B cannot outgrow the population
        current_b = min(current_b * growth_factor, population)
    return cumulative


def meeting_probability(group_a: float,
                        group_b: float,
                        growth_factor: float,
                        population: float,
                        weeks: int,
                        contacts_per_week: float) -> float:
    """
    Probability that at least one member of group A meets a member of group B

    Args:
        group_a: Number of people in the group of interest
        group_b: Number of infected people at the start
        growth_factor: Weekly multiplicative growth of group B
        population: Total population, held constant
        weeks: Number of weeks considered
        contacts_per_week: Unique people outside the own group met per week

    Returns:
        Probability in [0, 1]
    """
    return float(cumulative_meeting_probabilities(
        group_a, group_b, growth_factor, population, weeks, contacts_per_week
    )[-1])


def weeks_until_certain(group_a: float,
                        group_b: float,
                        growth_factor: float,
                        population: float,
                        contacts_per_week: float,
                        max_weeks: int = 1000) -> int:
    """
    First week after which the meeting probability reads as 100%

    A probability counts as certain once its truncated percentage
    int(P × 100) reaches 100.
    """
    cumulative = cumulative_meeting_probabilities(
        group_a, group_b, growth_factor, population, max_weeks, contacts_per_week
    )
    percentages = (cumulative * 100).astype(int)
    certain = np.flatnonzero(percentages >= 100)
    if certain.size == 0:
        raise ValueError(f"meeting does not become certain within {max_weeks} weeks")
    return int(certain[0]) + 1


if __name__ == "__main__":
    a, b, k, z = 45, 900, 1471508, 4
    d = (b + 75) / b

    p = meeting_probability(a, b, d, k, 4, z)
    print(f"Meeting probability over 4 weeks: {100 * p:.1f}%")
    print(f"Meeting certain after {weeks_until_certain(a, b, d, k, z)} weeks")
