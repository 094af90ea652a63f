from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import numpy as np
from rich.console import Console
from rich.table import Table

from .catalog import default_catalog
from .config import MutateOptions, RandomSketchSettings
from .deglobalize import deglobalize
from .logging_utils import configure_logging, debug_enabled, log_exception
from .morph import SketchMorpher
from .mutator import Mutator
from .random_sketch import RandomSketchGenerator

_LOGGER = logging.getLogger("hydramorph.cli")
_CONSOLE = Console()
_ERROR_CONSOLE = Console(stderr=True)


def _read_sketch(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _rng(seed: int | None) -> np.random.Generator:
    return np.random.default_rng(seed)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hydramorph")
    sub = parser.add_subparsers(dest="command", required=True)

    morph = sub.add_parser("morph", help="Print the morph steps between two sketches.")
    morph.add_argument("sketch_a", type=str, help="Path to the first sketch, or - for stdin.")
    morph.add_argument("sketch_b", type=str, help="Path to the second sketch.")
    morph.add_argument("--steps", type=int, default=10)

    mutate = sub.add_parser("mutate", help="Apply random glitches to a sketch.")
    mutate.add_argument("sketch", type=str, help="Path to the sketch, or - for stdin.")
    mutate.add_argument("--reroll", action="store_true", help="Re-glitch the same literal.")
    mutate.add_argument(
        "--transform", action="store_true", help="Swap a function instead of a literal."
    )
    mutate.add_argument("--count", type=int, default=1, help="Number of successive mutations.")
    mutate.add_argument("--seed", type=int, default=None)

    random_cmd = sub.add_parser("random", help="Generate a random sketch.")
    random_cmd.add_argument("--min", dest="min_functions", type=int, default=2)
    random_cmd.add_argument("--max", dest="max_functions", type=int, default=5)
    random_cmd.add_argument("--ignore", type=str, default="", help="Comma separated names.")
    random_cmd.add_argument("--seed", type=int, default=None)

    rewrite = sub.add_parser("deglobalize", help="Rewrite watched globals onto a prefix object.")
    rewrite.add_argument("sketch", type=str, help="Path to the sketch, or - for stdin.")
    rewrite.add_argument("--prefix", type=str, default="_h")

    sub.add_parser("catalog", help="List the known sketch functions.")
    return parser


def _print_catalog() -> None:
    table = Table(title="hydra functions")
    table.add_column("name")
    table.add_column("category")
    table.add_column("parameters")
    for spec in default_catalog():
        params = ", ".join(f"{p.name}={p.default}" for p in spec.parameters)
        table.add_row(spec.name, spec.category, params)
    _CONSOLE.print(table)


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    try:
        parser = build_parser()
        args = parser.parse_args(argv)

        if args.command == "morph":
            morpher = SketchMorpher()
            steps = morpher.morph_sketches(
                _read_sketch(args.sketch_a), _read_sketch(args.sketch_b), args.steps
            )
            for step in steps:
                _CONSOLE.print(f"// step {step.step} (t={step.t:.2f})", style="dim")
                _CONSOLE.print(step.code, markup=False, highlight=False, soft_wrap=True)
            return 0

        if args.command == "mutate":
            mutator = Mutator(rng=_rng(args.seed))
            options = MutateOptions(reroll=args.reroll, change_transform=args.transform)
            text = _read_sketch(args.sketch)
            for _ in range(max(1, args.count)):
                text = mutator.mutate(text, options)
            _CONSOLE.print(text, markup=False, highlight=False, soft_wrap=True, end="")
            return 0

        if args.command == "random":
            settings = RandomSketchSettings(ignored=args.ignore)
            generator = RandomSketchGenerator(settings, rng=_rng(args.seed))
            code = generator.generate_code(args.min_functions, args.max_functions)
            _CONSOLE.print(code, markup=False, highlight=False, soft_wrap=True)
            return 0

        if args.command == "deglobalize":
            text = deglobalize(_read_sketch(args.sketch), args.prefix)
            _CONSOLE.print(text, markup=False, highlight=False, soft_wrap=True, end="")
            return 0

        if args.command == "catalog":
            _print_catalog()
            return 0

        parser.print_help()
        return 1
    except Exception as exc:
        _LOGGER.warning("hydramorph CLI failed: %s", exc, exc_info=debug_enabled())
        log_exception("hydramorph CLI", exc)
        _ERROR_CONSOLE.print(
            f"hydramorph failed: {exc}",
            style="red",
            markup=False,
            highlight=False,
            soft_wrap=True,
        )
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
