"""
CPI Calculator - command line access to the standardizer and aggregator.

    cpi list
    cpi standardize co2_emissions --input co2=1.5
    cpi standardize gini_coefficient --input "incomes=[1200, 3400, 5600]"
    cpi aggregate record.json
"""

import argparse
import json
import sys
from typing import Any, Dict, List, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from cpi_engine.aggregator import Absent, aggregate
from cpi_engine.errors import CPIError
from cpi_engine.hierarchy import CPI_HIERARCHY
from cpi_engine.indicators import INDICATORS
from cpi_engine.standardizer import standardize

console = Console()


def parse_inputs(pairs: List[str]) -> Dict[str, Any]:
    """
    Parse name=value pairs. Values are read as JSON when possible so lists
    can be passed; anything else is kept as text for validation to handle.
    """
    inputs: Dict[str, Any] = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name.strip():
            raise argparse.ArgumentTypeError(f"expected name=value, got '{pair}'")
        try:
            inputs[name.strip()] = json.loads(value)
        except json.JSONDecodeError:
            inputs[name.strip()] = value
    return inputs


def _average_cell(level) -> str:
    if isinstance(level, Absent):
        return "[dim]no data[/dim]"
    return f"{level.average:.2f}"


def _comment_cell(level) -> str:
    if isinstance(level, Absent):
        return ""
    return level.comment


def cmd_list(args) -> int:
    table = Table(box=box.ROUNDED, title="Indicators")
    table.add_column("Key", style="dark_orange")
    table.add_column("Name")
    table.add_column("Sub-dimension", style="dim")
    table.add_column("Inputs")
    for definition in INDICATORS.values():
        sub_dimension = CPI_HIERARCHY.sub_dimension_for(definition.key)
        table.add_row(
            definition.key,
            definition.name,
            sub_dimension.name if sub_dimension else "",
            ", ".join(definition.input_names),
        )
    console.print(table)
    return 0


def cmd_standardize(args) -> int:
    result = standardize(args.key, parse_inputs(args.input or []))

    info = Table.grid(padding=(0, 2))
    info.add_column(style="dark_orange", justify="right")
    info.add_column(style="white")
    info.add_row("Raw value", f"{result.raw:.4f} {INDICATORS[args.key].unit}")
    info.add_row("Standardized", f"{result.standardized:.2f}")
    info.add_row("Comment", f"[bold]{result.comment}[/bold]")
    console.print(Panel(info, title=f"[bold white]{INDICATORS[args.key].name}[/bold white]",
                        border_style="dark_orange", box=box.ROUNDED))
    return 0


def cmd_aggregate(args) -> int:
    with open(args.record, "r", encoding="utf-8") as f:
        record = json.load(f)
    if not isinstance(record, dict):
        console.print("  [red]X[/red] Record file must contain a JSON object")
        return 1

    result = aggregate(record)
    table = Table(box=box.ROUNDED, title="City Prosperity Index")
    table.add_column("Level")
    table.add_column("Average", justify="right")
    table.add_column("Comment")
    table.add_row("[bold]City Prosperity Index[/bold]", _average_cell(result.index), _comment_cell(result.index))
    for dimension, definition in zip(result.dimensions, CPI_HIERARCHY.dimensions):
        table.add_row(f"[dark_orange]{definition.name}[/dark_orange]", _average_cell(dimension), _comment_cell(dimension))
        for sub_definition in definition.sub_dimensions:
            sub_dimension = result.sub_dimension(sub_definition.key)
            table.add_row(f"  {sub_definition.name}", _average_cell(sub_dimension), _comment_cell(sub_dimension))
    console.print(table)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cpi",
        description="City Prosperity Index calculator",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("list", help="List indicators and their inputs")

    standardize_parser = commands.add_parser("standardize", help="Standardize one indicator")
    standardize_parser.add_argument("key", help='Indicator key (e.g., "co2_emissions")')
    standardize_parser.add_argument(
        "--input", "-i",
        action="append",
        metavar="NAME=VALUE",
        help="Raw input; repeat for each input. Lists may be given as JSON",
    )

    aggregate_parser = commands.add_parser("aggregate", help="Aggregate a city record")
    aggregate_parser.add_argument("record", help="Path to a JSON city record")
    return parser


COMMANDS = {
    "list": cmd_list,
    "standardize": cmd_standardize,
    "aggregate": cmd_aggregate,
}


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return COMMANDS[args.command](args)
    except argparse.ArgumentTypeError as e:
        console.print(f"  [red]X[/red] {e}")
        return 2
    except CPIError as e:
        console.print(f"  [red]X[/red] {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
