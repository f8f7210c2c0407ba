import argparse
import logging
import sys
import typing

import dicedist.config as config
import dicedist.evaluate as evaluate
import dicedist.plot as plot
import dicedist.roll as roll
import dicedist.roll_parser as roll_parser
import dicedist.summary as summary

logger = logging.getLogger(__name__)


def _argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dicedist",
        description="""Compute the distribution of a dice expression.

Use XdY for X dice with Y sides, plain numbers for constants, and combine
them with + - * /. Operators apply strictly left to right, so use
parentheses to group: (2d6+1d4)*2.""",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("expression", help="the dice expression, e.g. 2d10+1d4")
    parser.add_argument(
        "--mode",
        choices=[mode.value for mode in evaluate.Mode],
        help="enumerate every outcome exactly, or sample with Monte Carlo",
    )
    parser.add_argument(
        "--simulations",
        type=int,
        help="number of Monte Carlo rolls (%s to %s)"
        % (config.SIMULATION_COUNT_MIN, config.SIMULATION_COUNT_MAX),
    )
    parser.add_argument(
        "--max-exact-outcomes",
        type=int,
        help="largest enumeration exact mode will attempt",
    )
    parser.add_argument("--seed", type=int, help="seed for Monte Carlo rolls")
    parser.add_argument(
        "--plot",
        metavar="FILE",
        help="write a bar chart: .html for interactive, .png/.svg/.pdf for static",
    )
    parser.add_argument("--settings", metavar="FILE", help="YAML settings file")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def format_report(
    tree: roll.Expression,
    mode: evaluate.Mode,
    result: summary.Summary,
    max_outcomes: typing.Optional[int] = evaluate.DEFAULT_MAX_EXACT_OUTCOMES,
) -> str:
    try:
        expected = "%r" % roll.Number(tree.mean(max_outcomes))
    except roll.TooManyOutcomesError as e:
        logger.info("no analytic mean: %s", e)
        expected = "n/a"
    lines = [
        "Input: %s" % tree,
        "Mode: %s" % mode.value,
        "Min: %r" % roll.Number(result.min),
        "Max: %r" % roll.Number(result.max),
        "Mean: %r" % roll.Number(result.mean),
        "Expected: %s" % expected,
    ]
    if result.non_finite:
        lines.append(
            "Non-finite: %s of %s outcomes divide by zero"
            % (result.non_finite, result.total)
        )
    if result.frequency_table:
        lines.append("")
        lines.append(result.to_frame().to_string(index=False))
    return "\n".join(lines)


def main(argv: typing.List[str] = sys.argv) -> int:
    args = _argument_parser().parse_args(argv[1:])

    overrides = {
        key: value
        for key, value in (
            ("mode", args.mode),
            ("simulation_count", args.simulations),
            ("max_exact_outcomes", args.max_exact_outcomes),
            ("seed", args.seed),
        )
        if value is not None
    }
    try:
        settings = config.load_settings(args.settings)
        if overrides:
            settings = settings.replace(**overrides)
    except config.SettingsError as e:
        print("Error in settings: %s" % e, file=sys.stderr)
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )
    logger.debug("settings: %s", settings)

    try:
        tree = roll_parser.parse(args.expression)
        outcomes, weighting = evaluate.evaluate(
            tree,
            settings.mode,
            simulation_count=settings.simulation_count,
            max_outcomes=settings.max_exact_outcomes,
            seed=settings.seed,
        )
        result = summary.summarize(outcomes, weighting)
    except roll.DiceRollError as e:
        print("Error in input: %s" % e.args[0], file=sys.stderr)
        return 1

    print(
        format_report(tree, settings.mode, result, settings.max_exact_outcomes)
    )

    if args.plot:
        plot.write_plot(plot.plot_summary(result, title=str(tree)), args.plot)
        logger.info("wrote %s", args.plot)
    return 0


if __name__ == "__main__":
    sys.exit(main())
