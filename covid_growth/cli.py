"""
Command Line Interface
======================
Reporting layer around the simulator and the meeting-probability helper
"""

import argparse
import logging
from typing import List, Optional

from .core.disease_params import DiseaseParameters, DEFAULT_PARAMS
from .core.seir_model import SEIRSimulator, SimulationConfig, plot_results
from .analysis.meeting import meeting_probability, weeks_until_certain

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='covid-growth',
        description='Agent-based epidemic growth simulation and group meeting estimates',
    )
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='Log progress (-v for INFO, -vv for DEBUG)')
    sub = parser.add_subparsers(dest='command', required=True)

    sim = sub.add_parser('simulate', help='Run the daily agent simulation')
    sim.add_argument('--population', type=int, default=10_000)
    sim.add_argument('--initial', type=int, default=10, help='Initially infected people')
    sim.add_argument('--days', type=int, default=120)
    sim.add_argument('--group', type=int, default=0, help='Size of the tracked group')
    sim.add_argument('--include-infected-in-group', action='store_true',
                     help='Draw group members from everyone, not only the susceptible')
    sim.add_argument('--seed', type=int, default=None)
    sim.add_argument('--r0', type=float, default=DEFAULT_PARAMS.basic_reproduction)
    sim.add_argument('--incubation', type=float, default=DEFAULT_PARAMS.incubation_period)
    sim.add_argument('--infectious', type=float, default=DEFAULT_PARAMS.infectious_duration)
    sim.add_argument('--fatality', type=float, default=DEFAULT_PARAMS.case_fatality_rate)
    sim.add_argument('--csv', default='', help='Write the daily time series to this file')
    sim.add_argument('--plot', default='', help='Save the SEIR plot to this file')

    meet = sub.add_parser('meet', help='Probability that two groups have met')
    meet.add_argument('--group-a', type=float, default=45)
    meet.add_argument('--group-b', type=float, default=900)
    meet.add_argument('--weekly-new', type=float, default=75,
                      help='People added to group B in the first week')
    meet.add_argument('--population', type=float, default=1_471_508)
    meet.add_argument('--weeks', type=int, default=4)
    meet.add_argument('--contacts', type=float, default=4,
                      help='Unique people met per week outside the own group')
    return parser


def _simulate(args) -> int:
    params = DiseaseParameters(
        basic_reproduction=args.r0,
        incubation_period=args.incubation,
        infectious_duration=args.infectious,
        case_fatality_rate=args.fatality,
    )
    config = SimulationConfig(
        population_size=args.population,
        initial_infections=args.initial,
        group_size=args.group,
        group_only_susceptible=not args.include_infected_in_group,
        total_days=args.days,
        seed=args.seed,
    )

    simulator = SEIRSimulator(config, params)
    results = simulator.run()
    final = results.iloc[-1]

    print(f"After {config.total_days} days:")
    print(f"  Ever infected: {final['infected']} of {final['total']} "
          f"({100 * final['infected'] / final['total']:.1f}%)")
    print(f"  Recovered: {final['R']}")
    print(f"  Deceased: {final['D']}")
    if config.group_size:
        print(f"  Group members infected: {final['group_infected']} of {config.group_size}")

    if args.csv:
        results.to_csv(args.csv, index=False)
        print(f"Time series saved as '{args.csv}'")
    if args.plot:
        import matplotlib
        matplotlib.use('Agg')
        fig = plot_results(results, group_size=config.group_size)
        fig.savefig(args.plot, dpi=150, bbox_inches='tight')
        print(f"Plot saved as '{args.plot}'")
    return 0


def _meet(args) -> int:
    growth = (args.group_b + args.weekly_new) / args.group_b if args.group_b else 1.0
    p = meeting_probability(args.group_a, args.group_b, growth,
                            args.population, args.weeks, args.contacts)

    print(f"The probability that {int(args.group_a)} people from group A meet any of the "
          f"{int(args.group_b)} people from group B")
    print(f"(growing by a factor of {growth:.4f} per week) within a population of "
          f"{int(args.population)}, meeting {int(args.contacts)} people per week,")
    print(f"within {args.weeks} weeks is {int(p * 100)}%.")

    try:
        certain = weeks_until_certain(args.group_a, args.group_b, growth,
                                      args.population, args.contacts)
    except ValueError as exc:
        logger.info("No certain meeting: %s", exc)
        print("A meeting does not become certain in the horizon considered.")
    else:
        print(f"A meeting is certain after {certain} weeks.")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    handler = _simulate if args.command == 'simulate' else _meet
    try:
        return handler(args)
    except ValueError as exc:
        parser.error(str(exc))
