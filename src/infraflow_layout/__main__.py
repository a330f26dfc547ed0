"""CLI entry point for infraflow-layout."""

import json
import logging
import sys

import click

from infraflow_layout import layout, unlayout
from infraflow_layout.config import DEFAULT_CONFIG, LayoutConfig
from infraflow_layout.engine.types import LayoutResult
from infraflow_layout.ir.spec import Spec


def _read_json(input: str | None) -> object:
    if input:
        try:
            with open(input, encoding="utf-8") as f:
                text = f.read()
        except OSError as e:
            click.echo(f"error: cannot read '{input}': {e}", err=True)
            sys.exit(1)
    else:
        text = sys.stdin.read()

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        click.echo(f"error: invalid JSON: {e}", err=True)
        sys.exit(1)


@click.command()
@click.argument("input", required=False, type=click.Path(exists=True))
@click.option("--horizontal-gap", "-H", type=float, default=None, help="Distance between layer columns")
@click.option("--vertical-gap", "-V", type=float, default=None, help="Distance between nodes in a layer")
@click.option("--start-x", type=float, default=None, help="X of the first column")
@click.option("--start-y", type=float, default=None, help="Y of the top row")
@click.option("--unlayout", "reverse", is_flag=True, help="Read a layout and print the recovered spec")
@click.option("--output", "-o", "output", type=str, default=None, help="Write output to this file instead of stdout")
@click.option("--verbose", "-v", is_flag=True, help="Log layout decisions to stderr")
def main(
    input: str | None,
    horizontal_gap: float | None,
    vertical_gap: float | None,
    start_x: float | None,
    start_y: float | None,
    reverse: bool,
    output: str | None,
    verbose: bool,
) -> None:
    """Infrastructure spec JSON to positioned diagram JSON."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    raw = _read_json(input)

    try:
        if reverse:
            result = LayoutResult.from_dict(raw)
            payload = unlayout(result.nodes, result.edges).to_dict()
        else:
            config: LayoutConfig = DEFAULT_CONFIG.merged(
                horizontal_gap=horizontal_gap,
                vertical_gap=vertical_gap,
                start_x=start_x,
                start_y=start_y,
            )
            payload = layout(Spec.from_dict(raw), config).to_dict()
    except ValueError as e:
        click.echo(f"error: {e}", err=True)
        sys.exit(1)

    rendered = json.dumps(payload, ensure_ascii=False, indent=2) + "\n"
    if output:
        try:
            with open(output, "w", encoding="utf-8") as f:
                f.write(rendered)
        except OSError as e:
            click.echo(f"error: cannot write '{output}': {e}", err=True)
            sys.exit(1)
    else:
        click.echo(rendered, nl=False)


if __name__ == "__main__":
    main()
