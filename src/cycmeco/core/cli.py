"""
--------------------------------------------------------------------------------
<cycmeco project>
src/cycmeco/core/cli.py

Author(s): Eric J. South
--------------------------------------------------------------------------------
"""

from pathlib import Path

import typer
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.theme import Theme

from cycmeco.core.config_model import ConversionSpec, DatasetOptions
from cycmeco.core.convert import convert as convert_table
from cycmeco.core.convert import convert_spec
from cycmeco.core.dataset import Dataset
from cycmeco.core.errors import CycMecoError
from cycmeco.ontology.reference import REFERENCES, load_reference
from cycmeco.utils.logging import setup_logging

THEME = Theme(
    {
        "title": "bold cyan",
        "accent": "cyan",
        "ok": "bold green",
        "warn": "bold yellow",
        "error": "bold red",
        "muted": "dim",
        "path": "magenta",
    }
)

app = typer.Typer(
    add_completion=False,
    help=(
        "cycmeco — NCycDB / PCycDB abundance tables to community datasets.\n\n"
        "Reads a gene abundance table, appends the 'unclassified' residual from the total read count "
        "in its header, reconciles sample names and metadata, detects the reference ontology and "
        "writes feature, annotation and sample tables."
    ),
)
console = Console(theme=THEME)


def _table(title: str) -> Table:
    return Table(
        title=f"[title]{title}[/title]",
        title_justify="left",
        header_style="bold",
        box=box.ROUNDED,
        expand=True,
        show_lines=False,
        show_edge=True,
    )


def _fail(e: CycMecoError) -> None:
    console.print(
        Panel(
            f"[error]✗ {type(e).__name__}[/error]\n{escape(str(e))}",
            border_style="error",
            box=box.ROUNDED,
        )
    )
    raise typer.Exit(code=1)


def _report(dataset: Dataset, written: dict[str, Path]) -> None:
    onto = dataset.reference.ontology.value if dataset.reference else "?"
    t = _table(f"Dataset • {onto}")
    t.add_column("table", style="accent")
    t.add_column("rows", justify="right")
    t.add_column("columns", justify="right")
    t.add_column("file", style="path", overflow="fold")
    shapes = {
        "feature_table": dataset.otu_table.shape,
        "tax_table": dataset.tax_table.shape,
    }
    if dataset.sample_table is not None:
        shapes["sample_table"] = dataset.sample_table.shape
    for label, (rows, cols) in shapes.items():
        t.add_row(label, str(rows), str(cols), str(written.get(label, "")))
    unclassified = dataset.otu_table.loc["unclassified"] if "unclassified" in dataset.otu_table.index else None
    sub = "[muted]no 'unclassified' row[/muted]"
    if unclassified is not None:
        neg = int((unclassified < 0).sum())
        sub = f"[muted]unclassified: min={unclassified.min():g} max={unclassified.max():g}[/muted]"
        if neg:
            sub += f" [warn]• {neg} negative[/warn]"
    console.print(Panel(t, border_style="accent", box=box.ROUNDED, subtitle=sub))


@app.command(
    help=(
        "Convert one abundance table. Writes feature_table.tsv, tax_table.tsv and (with --sample-table) "
        "sample_table.tsv under --out."
    )
)
def convert(
    feature_table: Path = typer.Argument(..., metavar="FEATURE_TABLE", help="NCycDB/PCycDB abundance table (tsv)."),
    sample_table: Path | None = typer.Option(
        None, "--sample-table", "-s", metavar="PATH", help="Sample metadata (csv, tsv/txt, xlsx/xls)."
    ),
    match_table: Path | None = typer.Option(
        None, "--match-table", "-m", metavar="PATH", help="Two-column table: raw sample name → new sample name."
    ),
    total_reads: int | None = typer.Option(
        None, "--total-reads", min=0, metavar="N", help="Override the read count from the header line."
    ),
    auto_tidy: bool = typer.Option(False, "--auto-tidy", help="Trim tables to shared samples and features."),
    out: Path = typer.Option(Path("outputs"), "--out", "-o", metavar="DIR", help="Output directory."),
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        metavar="LEVEL",
        help="Logging level: DEBUG | INFO | WARNING | ERROR (default: INFO).",
    ),
):
    setup_logging(log_level, log_file=out / "cycmeco.log")
    try:
        dataset = convert_table(
            feature_table,
            sample_table=sample_table,
            match_table=match_table,
            total_reads=total_reads,
            options=DatasetOptions(auto_tidy=auto_tidy),
        )
        written = dataset.save_tables(out)
    except CycMecoError as e:
        _fail(e)
        return
    _report(dataset, written)


@app.command(help="Run a conversion described by a YAML config (feature_table, sample_table, match_table, options, outputs).")
def run(
    config: Path = typer.Argument(..., metavar="CONFIG", help="Path to a conversion config.yaml."),
    log_level: str = typer.Option("INFO", "--log-level", metavar="LEVEL"),
):
    try:
        spec = ConversionSpec.load(config)
        setup_logging(log_level, log_file=spec.outputs / "cycmeco.log")
        dataset = convert_spec(spec)
        written = dataset.save_tables(spec.outputs)
    except CycMecoError as e:
        _fail(e)
        return
    _report(dataset, written)


@app.command(help="List the bundled reference ontologies.")
def ontologies():
    t = _table("Reference ontologies")
    t.add_column("#", justify="right", style="muted")
    t.add_column("ontology", style="accent")
    t.add_column("genes", justify="right")
    t.add_column("pathways", justify="right")
    t.add_column("levels")
    t.add_column("split by", justify="center")
    for i, ref in enumerate(REFERENCES, 1):
        df = load_reference(ref.ontology)
        pathways = {p for v in df["Pathway"] for p in str(v).split(ref.split_by)}
        t.add_row(str(i), ref.ontology.value, str(len(df)), str(len(pathways)), ", ".join(ref.levels), ref.split_by)
    console.print(Panel(t, border_style="accent", box=box.ROUNDED))


def main() -> None:
    app()
