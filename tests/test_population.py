"""Tests for covid_growth.core.population: agents and the daily transmission rule."""

import numpy as np
import pytest

from covid_growth.core.disease_params import DiseaseParameters
from covid_growth.core.population import DiseaseState, Person, Population


def snapshot(pop):
    return [(p.state, p.days_since_infection, p.has_transmitted, p.in_group)
            for p in pop.people]


def assert_day_count_invariant(pop):
    for person in pop.people:
        assert (person.state == DiseaseState.SUSCEPTIBLE) == (person.days_since_infection is None)


# ═══════════════════════════════════════════════════════════════════════
# PERSON
# ═══════════════════════════════════════════════════════════════════════

class TestPerson:

    def test_new_person_is_susceptible(self):
        person = Person(id=0)
        assert person.state == DiseaseState.SUSCEPTIBLE
        assert person.days_since_infection is None
        assert not person.has_transmitted
        assert not person.in_group
        assert not person.ever_infected

    def test_infect_skips_exposed_phase(self):
        person = Person(id=0)
        person.infect()
        assert person.state == DiseaseState.INFECTIOUS
        assert person.days_since_infection == 0

    def test_expose(self):
        person = Person(id=0)
        person.expose()
        assert person.state == DiseaseState.EXPOSED
        assert person.days_since_infection == 0

    def test_advance_day_on_susceptible_is_noop(self, params):
        person = Person(id=0)
        person.advance_day(params)
        assert person.state == DiseaseState.SUSCEPTIBLE
        assert person.days_since_infection is None

    @pytest.mark.parametrize("will_die, terminal", [
        (False, DiseaseState.RECOVERED),
        (True, DiseaseState.DECEASED),
    ])
    def test_progression_follows_elapsed_days(self, params, will_die, terminal):
        person = Person(id=0, will_die=will_die)
        person.infect()

        states = []
        for _ in range(12):
            person.advance_day(params)
            states.append(person.state)

        # days 1-5 exposed, 6-8 infectious, 9+ terminal
        E, I = DiseaseState.EXPOSED, DiseaseState.INFECTIOUS
        assert states == [E] * 5 + [I] * 3 + [terminal] * 4
        assert person.days_since_infection == 12

    def test_exposed_person_progresses_the_same_way(self, params):
        person = Person(id=0)
        person.expose()
        for _ in range(6):
            person.advance_day(params)
        assert person.state == DiseaseState.INFECTIOUS

    def test_zero_incubation_goes_straight_to_infectious(self):
        params = DiseaseParameters(incubation_period=0.0, infectious_duration=1.5)
        person = Person(id=0)
        person.expose()
        person.advance_day(params)
        assert person.state == DiseaseState.INFECTIOUS
        person.advance_day(params)
        assert person.state == DiseaseState.RECOVERED

    def test_terminal_state_never_changes(self, params):
        person = Person(id=0, will_die=True)
        person.infect()
        for _ in range(9):
            person.advance_day(params)
        assert person.state == DiseaseState.DECEASED
        for _ in range(100):
            person.advance_day(params)
            assert person.state == DiseaseState.DECEASED

    def test_mark_transmitted_is_idempotent(self, params):
        person = Person(id=0)
        person.infect()
        person.mark_transmitted()
        person.mark_transmitted()
        assert person.has_transmitted

        # stays set after the infectious window closes
        for _ in range(20):
            person.advance_day(params)
        person.mark_transmitted()
        assert person.has_transmitted

    @pytest.mark.parametrize("prepare", [lambda p: None, Person.expose])
    def test_mark_transmitted_requires_infectious(self, prepare):
        person = Person(id=0)
        prepare(person)
        with pytest.raises(ValueError):
            person.mark_transmitted()
        assert not person.has_transmitted

    def test_join_group_is_idempotent(self):
        person = Person(id=0)
        person.join_group()
        person.join_group()
        assert person.in_group


# ═══════════════════════════════════════════════════════════════════════
# CONSTRUCTION
# ═══════════════════════════════════════════════════════════════════════

class TestConstruction:

    def test_initial_infections(self, population):
        assert population.size == 100
        assert len(population.people) == 100
        assert population.infected_count == 10

        infected = population.get_ever_infected()
        assert len({p.id for p in infected}) == 10
        assert all(p.state == DiseaseState.INFECTIOUS for p in infected)
        assert all(p.days_since_infection == 0 for p in infected)
        assert_day_count_invariant(population)

    @pytest.mark.parametrize("initial", [0, 1, 100])
    def test_boundary_seed_sizes(self, params, initial):
        pop = Population(100, initial, params=params, seed=0)
        assert pop.infected_count == initial

    @pytest.mark.parametrize("size, initial", [(0, 0), (-5, 0), (10, 11), (10, -1)])
    def test_invalid_cardinality(self, params, size, initial):
        with pytest.raises(ValueError):
            Population(size, initial, params=params, seed=0)

    def test_fate_is_drawn_per_person(self):
        doomed = Population(50, 5, params=DiseaseParameters(case_fatality_rate=1.0), seed=0)
        spared = Population(50, 5, params=DiseaseParameters(case_fatality_rate=0.0), seed=0)
        assert all(p.will_die for p in doomed.people)
        assert not any(p.will_die for p in spared.people)

    def test_seed_and_generator_are_equivalent(self, params):
        a = Population(200, 20, params=params, seed=99)
        b = Population(200, 20, params=params, rng=np.random.default_rng(99))
        assert snapshot(a) == snapshot(b)
        assert [p.will_die for p in a.people] == [p.will_die for p in b.people]


# ═══════════════════════════════════════════════════════════════════════
# GROUP ASSIGNMENT
# ═══════════════════════════════════════════════════════════════════════

class TestAssignToGroup:

    def test_only_susceptible(self, population):
        population.assign_to_group(42)
        members = population.get_group_members()
        assert len(members) == 42
        assert len({p.id for p in members}) == 42
        assert all(p.state == DiseaseState.SUSCEPTIBLE for p in members)
        assert population.group_infected_count == 0

    def test_all_susceptible_can_be_assigned(self, population):
        population.assign_to_group(90)
        assert len(population.get_group_members()) == 90

    def test_too_many_susceptible_rejected(self, population):
        with pytest.raises(ValueError):
            population.assign_to_group(91)
        assert population.get_group_members() == []

    def test_anyone(self, population):
        population.assign_to_group(100, only_susceptible=False)
        assert len(population.get_group_members()) == 100
        assert population.group_infected_count == 10

        with pytest.raises(ValueError):
            population.assign_to_group(101, only_susceptible=False)

    def test_existing_members_may_be_redrawn(self, population):
        population.assign_to_group(60)
        population.assign_to_group(60)
        assert 60 <= len(population.get_group_members()) <= 90

    def test_negative_count_rejected(self, population):
        with pytest.raises(ValueError):
            population.assign_to_group(-1)

    def test_group_does_not_change_disease_state(self, population):
        before = [p.state for p in population.people]
        population.assign_to_group(30)
        assert [p.state for p in population.people] == before


# ═══════════════════════════════════════════════════════════════════════
# RANDOM INFECTION
# ═══════════════════════════════════════════════════════════════════════

class TestExposeRandom:

    def test_infects_distinct_susceptible(self, population):
        assert population._expose_random(25) == 25
        assert population.infected_count == 35
        newly = [p for p in population.get_ever_infected() if p.state == DiseaseState.INFECTIOUS]
        assert len(newly) == 35

    def test_excess_rejected(self, population):
        with pytest.raises(ValueError):
            population._expose_random(91)
        assert population.infected_count == 10

    def test_exhaust_pool(self, population):
        population._expose_random(90)
        assert population.infected_count == 100
        assert population.get_susceptible() == []


# ═══════════════════════════════════════════════════════════════════════
# TIME STEPPING
# ═══════════════════════════════════════════════════════════════════════

class TestAdvanceTime:

    def test_zero_days_is_noop(self, population):
        before = snapshot(population)
        assert population.advance_time(0) == 0
        assert snapshot(population) == before
        assert population.infected_count == 10

    def test_negative_days_rejected(self, population):
        with pytest.raises(ValueError):
            population.advance_time(-1)

    def test_generation_growth(self, params):
        pop = Population(1000, 10, params=params, seed=5)

        # seeds are exposed on days 1-5 and transmit once on day 6
        assert pop.advance_time(5) == 0
        assert pop.infected_count == 10
        assert pop.advance_time(1) == 11  # round(10 × 1.07)
        assert pop.infected_count == 21

        seeds = [p for p in pop.people if p.days_since_infection == 6]
        assert len(seeds) == 10
        assert all(p.has_transmitted for p in seeds)

        # seeds stay infectious on days 7-8 but never transmit again
        assert pop.advance_time(5) == 0
        assert pop.infected_count == 21
        assert pop.advance_time(1) == 12  # round(11 × 1.07)
        assert pop.infected_count == 33

    def test_new_exposures_round_half_up(self):
        params = DiseaseParameters(basic_reproduction=1.25)
        pop = Population(100, 2, params=params, seed=1)
        assert pop.advance_time(6) == 3  # 2.5 rounds to 3
        assert pop.infected_count == 5

    def test_zero_reproduction_never_spreads(self):
        pop = Population(100, 10, params=DiseaseParameters(basic_reproduction=0.0), seed=1)
        assert pop.advance_time(50) == 0
        assert pop.infected_count == 10
        assert all(p.state in (DiseaseState.RECOVERED, DiseaseState.DECEASED)
                   for p in pop.get_ever_infected())

    def test_saturates_when_pool_runs_out(self):
        pop = Population(20, 10, params=DiseaseParameters(basic_reproduction=3.0), seed=2)
        assert pop.advance_time(6) == 10
        assert pop.infected_count == 20
        assert pop.advance_time(30) == 0
        assert pop.get_susceptible() == []

    def test_infected_count_is_monotonic(self, population):
        previous = population.infected_count
        for _ in range(60):
            population.advance_time(1)
            current = population.infected_count
            assert current >= previous
            previous = current
            assert_day_count_invariant(population)

    def test_transmit_marked_at_most_once(self, params, monkeypatch):
        calls = {}
        original = Person.mark_transmitted

        def counting(self):
            calls[self.id] = calls.get(self.id, 0) + 1
            original(self)

        monkeypatch.setattr(Person, "mark_transmitted", counting)

        pop = Population(500, 20, params=params, seed=11)
        for _ in range(4):
            pop.advance_time(15)

        assert calls
        assert max(calls.values()) == 1
        transmitted = {p.id for p in pop.people if p.has_transmitted}
        assert transmitted == set(calls)

    def test_only_people_past_incubation_transmit(self, population, params):
        population.advance_time(40)
        for person in population.people:
            if person.has_transmitted:
                assert person.days_since_infection >= params.incubation_period

    def test_group_members_counted_when_infected(self):
        pop = Population(50, 5, params=DiseaseParameters(basic_reproduction=10.0), seed=3)
        pop.assign_to_group(45)
        assert pop.group_infected_count == 0
        pop.advance_time(6)
        assert pop.infected_count == 50
        assert pop.group_infected_count == 45

    def test_same_seed_same_trajectory(self, params):
        a = Population(300, 10, params=params, rng=np.random.default_rng(2020))
        b = Population(300, 10, params=params, rng=np.random.default_rng(2020))
        a.assign_to_group(30)
        b.assign_to_group(30)
        for _ in range(80):
            a.advance_time(1)
            b.advance_time(1)
            assert snapshot(a) == snapshot(b)


def test_fate_never_reassigned(population):
    fates = [p.will_die for p in population.people]
    population.assign_to_group(30)
    population._expose_random(20)
    population.advance_time(40)
    population.assign_to_group(100, only_susceptible=False)
    assert [p.will_die for p in population.people] == fates

    for person in population.get_ever_infected():
        if person.days_since_infection >= population.params.terminal_day:
            expected = DiseaseState.DECEASED if person.will_die else DiseaseState.RECOVERED
            assert person.state == expected


def test_state_counts_and_summary(population):
    counts = population.get_state_counts()
    assert counts[DiseaseState.SUSCEPTIBLE] == 90
    assert counts[DiseaseState.INFECTIOUS] == 10
    assert sum(counts.values()) == 100

    text = population.summary()
    assert "Total size: 100" in text
    assert "Ever infected: 10" in text
