"""Click CLI entry point for protein_cartoon."""

from __future__ import annotations
import re
from pathlib import Path

import click

from protein_cartoon.colors import COLOR_SCHEMES

_RANGE_RE = re.compile(r"^(?P<chain>\w):(?P<first>-?\d+)(?:-(?P<last>-?\d+))?$")


def _parse_range(value: str) -> tuple[str, int, int]:
    """Parse ``CHAIN:FIRST-LAST`` (or ``CHAIN:SEQ``) into a residue range."""
    m = _RANGE_RE.match(value.strip())
    if m is None:
        raise click.BadParameter(
            f"Cannot parse residue range {value!r}. Use 'A:10-25' or 'A:42'."
        )
    first = int(m.group("first"))
    last = int(m.group("last")) if m.group("last") is not None else first
    return m.group("chain"), first, last


def _parse_setting(value: str) -> tuple[str, str]:
    if "=" not in value:
        raise click.BadParameter(f"Expected NAME=VALUE, got {value!r}")
    name, _, raw = value.partition("=")
    return name.strip().replace("-", "_"), raw.strip()


@click.command()
@click.argument("input", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output-dir", default=".", show_default=True,
    type=click.Path(file_okay=False),
    help="Directory for output files.",
)
@click.option(
    "--formats", default="obj,json", show_default=True,
    help="Comma-separated list of output formats: obj,ply,glb,stl,json,txt,png,html.",
)
@click.option(
    "--color-by", default="ss", show_default=True,
    type=click.Choice(list(COLOR_SCHEMES)),
    help="Per-atom colour scheme.",
)
@click.option(
    "--hide", "hide_strs", multiple=True, metavar="CHAIN:FIRST-LAST",
    help="Hide a residue range, e.g. '--hide A:10-25'.  Repeatable.",
)
@click.option(
    "--subdivisions", default=None, type=int,
    help="Curve samples per residue (default 8).",
)
@click.option(
    "--set", "settings", multiple=True, metavar="NAME=VALUE",
    help="Override any geometry parameter, e.g. '--set helix_width=2.4'.  Repeatable.",
)
@click.option("--verbose", is_flag=True, help="Print progress messages.")
def main(
    input: str,
    output_dir: str,
    formats: str,
    color_by: str,
    hide_strs: tuple[str, ...],
    subdivisions: int | None,
    settings: tuple[str, ...],
    verbose: bool,
) -> None:
    """Build a cartoon (ribbon) surface for the protein in INPUT (.pdb).

    Helices become flat ribbons, strands become arrows and coils become thin
    tubes; the result is written as mesh files and/or summaries.
    """
    from protein_cartoon.config import CartoonConfig
    from protein_cartoon.pipeline import cartoon_pdb

    overrides = dict(_parse_setting(s) for s in settings)
    if subdivisions is not None:
        overrides["subdivisions"] = subdivisions
    try:
        config = CartoonConfig.from_overrides(overrides)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--set") from exc

    hidden = [_parse_range(s) for s in hide_strs]
    fmt_list = [f.strip().lower() for f in formats.split(",") if f.strip()]

    rep = cartoon_pdb(
        pdb_path=Path(input),
        output_dir=output_dir,
        formats=fmt_list,
        color_by=color_by,
        config=config,
        hidden=hidden or None,
        verbose=verbose,
    )
    if verbose:
        click.echo(f"{len(rep.meshes)} chain mesh(es) written to {output_dir}")
