import argparse
import logging
import sys
from collections.abc import Sequence

from adteval.check import check_environment, check_program
from adteval.config import Settings
from adteval.errors import EvalError
from adteval.evaluator import Evaluator
from adteval.examples import ALL_EXAMPLES
from adteval.laws import verify_prelude
from adteval.load import load_expr_from_file
from adteval.prelude import default_evaluator
from adteval.reference import generate_reference
from adteval.report import format_check, format_laws
from adteval.result import Err, Ok
from adteval.serialization import dumps_value
from adteval.show import show

logger = logging.getLogger("adteval")


def handle_eval(ev: Evaluator, files: Sequence[str], *, as_json: bool, check: bool) -> int:
    """Evaluate each JSON program and print its value."""
    failures = 0
    for path in files:
        expr_or_err = load_expr_from_file(path)
        match expr_or_err:
            case str(err):
                print(f"{path}: {err}", file=sys.stderr)
                failures += 1
                continue
            case expr:
                pass

        if check:
            result = check_program(expr, ev.types, ev.registry, ev.globals, name=path)
            if not result.is_well_formed:
                print(format_check(result), file=sys.stderr)
                failures += 1
                continue

        match ev.run(expr):
            case Ok(value):
                try:
                    print(dumps_value(value) if as_json else show(value))
                except TypeError as e:
                    print(f"{path}: {e}", file=sys.stderr)
                    failures += 1
                except EvalError as e:
                    print(f"{path}: {type(e).__name__}: {e}", file=sys.stderr)
                    failures += 1
            case Err(e):
                print(f"{path}: {type(e).__name__}: {e}", file=sys.stderr)
                failures += 1

    return 1 if failures else 0


def handle_check(ev: Evaluator, files: Sequence[str]) -> int:
    """Print diagnostics for the environment and for each program."""
    env_result = check_environment(ev.types, ev.registry)
    print(format_check(env_result))
    any_failure = not env_result.is_well_formed

    for path in files:
        expr_or_err = load_expr_from_file(path)
        match expr_or_err:
            case str(err):
                print(f"{path}: {err}")
                any_failure = True
            case expr:
                result = check_program(expr, ev.types, ev.registry, ev.globals, name=path)
                print(format_check(result))
                any_failure = any_failure or not result.is_well_formed

    return 1 if any_failure else 0


def handle_laws(ev: Evaluator, type_name: str | None) -> int:
    try:
        results = verify_prelude(ev, type_name)
    except KeyError as e:
        print(f"Error: {e.args[0]}", file=sys.stderr)
        return 1
    print(format_laws(results))
    return 0 if all(r.holds for r in results) else 1


def handle_demo(ev: Evaluator) -> int:
    failures = 0
    for name, build, expected in ALL_EXAMPLES:
        match ev.run(build()):
            case Ok(value):
                rendered = show(value)
                mark = "ok" if rendered == expected else "MISMATCH"
                if rendered != expected:
                    failures += 1
                print(f"  {name:<34} {rendered:<32} {mark}")
            case Err(e):
                failures += 1
                print(f"  {name:<34} {type(e).__name__}: {e}")
    return 1 if failures else 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="adteval",
        description="Evaluate programs over algebraic data types with interface dispatch",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override ADTEVAL_LOG_LEVEL.",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Command: eval
    eval_parser = subparsers.add_parser(
        "eval", help="Evaluate one or more JSON programs and print their values."
    )
    eval_parser.add_argument("files", nargs="+", metavar="FILE", help="Program .json file(s).")
    eval_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Print values as JSON instead of their rendered form.",
    )
    eval_parser.add_argument(
        "--check",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Run static checks before evaluating (default: on).",
    )

    # Command: check
    check_parser = subparsers.add_parser(
        "check", help="Check the prelude environment and any given programs."
    )
    check_parser.add_argument("files", nargs="*", metavar="FILE", help="Program .json file(s).")

    # Command: laws
    laws_parser = subparsers.add_parser(
        "laws", help="Verify Functor/Monad/Monoid laws for the prelude instances."
    )
    laws_parser.add_argument("--type", dest="type_name", help="Only check this type.")

    # Command: reference
    subparsers.add_parser("reference", help="Print the Markdown reference.")

    # Command: demo
    subparsers.add_parser("demo", help="Evaluate the bundled example programs.")

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    match Settings.from_env():
        case Ok(settings):
            pass
        case Err(e):
            print(f"Configuration error: {e}", file=sys.stderr)
            return 2

    logging.basicConfig(
        level=args.log_level or settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ev = default_evaluator(settings)
    logger.debug("Loaded %d instances", len(ev.registry))

    try:
        match args.command:
            case "eval":
                return handle_eval(ev, args.files, as_json=args.json, check=args.check)
            case "check":
                return handle_check(ev, args.files)
            case "laws":
                return handle_laws(ev, args.type_name)
            case "reference":
                print(generate_reference(ev.types, ev.registry))
                return 0
            case "demo":
                return handle_demo(ev)
            case None:
                parser.print_help()
                return 1
            case _:
                print(f"Unknown command: {args.command}", file=sys.stderr)
                parser.print_help()
                return 1
    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
