"""CLI for ring-trng."""

from __future__ import annotations

import sys
import time

import click

from ring_trng import __version__
from ring_trng.config import ConfigurationError, TrngConfig, load_config
from ring_trng.log import get_logger


@click.group()
@click.version_option(__version__)
def main() -> None:
    """ring-trng — cycle-accurate ring-oscillator TRNG pipeline."""


def pipeline_options(fn):
    """Options shared by every command that builds a pipeline."""
    options = [
        click.option("--config", "config_path", default=None, type=click.Path(dir_okay=False),
                     help="YAML config file (trng/logging sections)."),
        click.option("--cells", default=None, type=int, help="Number of entropy cells."),
        click.option("--length", "first_length", default=None, type=int,
                     help="Oscillator length of the first cell (odd)."),
        click.option("--fallback/--physical", default=None,
                     help="Deterministic fallback source (simulation only) or ring oscillator model."),
        click.option("--seed", default=None, type=int, help="Seed for the oscillator jitter model."),
        click.option("--reset-ticks", default=5, show_default=True, type=int,
                     help="Ticks to hold reset before enabling."),
    ]
    for opt in reversed(options):
        fn = opt(fn)
    return fn


# ────────────────────────────────────────────────────────────
# Generate — stream output bytes to stdout
# ────────────────────────────────────────────────────────────


@main.command()
@pipeline_options
@click.option("--format", "fmt", type=click.Choice(["raw", "hex", "base64"]), default="hex",
              help="Output format.")
@click.option("--bytes", "n_bytes", default=32, type=click.IntRange(min=0), help="Total bytes to produce.")
@click.option("--max-ticks", default=None, type=int, help="Give up after this many ticks.")
def generate(config_path, cells, first_length, fallback, seed, reset_ticks,
             fmt: str, n_bytes: int, max_ticks: int | None) -> None:
    """Run the pipeline and write output bytes to stdout.

    Examples:

        ring-trng generate --fallback --bytes 16

        ring-trng generate --format raw --bytes 4096 > /tmp/trng.bin
    """
    import base64

    from ring_trng.pipeline import PipelineStalled

    pipe = _make_pipeline(config_path, cells, first_length, fallback, seed, reset_ticks)
    try:
        data = pipe.collect(n_bytes, max_ticks=max_ticks).tobytes()
    except PipelineStalled as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    try:
        if fmt == "raw":
            sys.stdout.buffer.write(data)
            sys.stdout.buffer.flush()
        elif fmt == "hex":
            click.echo(data.hex())
        elif fmt == "base64":
            click.echo(base64.b64encode(data).decode())
    except BrokenPipeError:
        pass


# ────────────────────────────────────────────────────────────
# Trace — per-tick register view
# ────────────────────────────────────────────────────────────


@main.command()
@pipeline_options
@click.option("--ticks", default=64, type=int, help="Number of enabled ticks to trace.")
@click.option("--only-valid", is_flag=True, help="Only show ticks with an output byte.")
def trace(config_path, cells, first_length, fallback, seed, reset_ticks,
          ticks: int, only_valid: bool) -> None:
    """Print a per-tick table of the pipeline registers."""
    from rich.console import Console
    from rich.table import Table

    pipe = _make_pipeline(config_path, cells, first_length, fallback, seed, reset_ticks)

    table = Table(title=f"ring-trng trace — lengths {pipe.config.cell_lengths}")
    table.add_column("Tick", justify="right")
    table.add_column("En")
    table.add_column("Cell enables")
    table.add_column("Raw")
    table.add_column("VN pair")
    table.add_column("Ph")
    table.add_column("Count", justify="right")
    table.add_column("Mix")
    table.add_column("Valid")

    for _ in range(ticks):
        r = pipe.advance(reset=False, enable=True)
        if only_valid and not r.valid:
            continue
        s = pipe.snapshot()
        table.add_row(
            str(s.tick),
            str(s.enable),
            "".join(str(c.enable_out) for c in s.cells),
            str(s.raw_bit),
            f"{s.extractor_samples[0]}{s.extractor_samples[1]}",
            str(s.extractor_phase),
            str(s.accepted_count),
            f"{s.mix_register:08b}",
            "[bold green]✓ 0x%02x[/]" % r.byte if r.valid else "",
        )

    Console().print(table)


# ────────────────────────────────────────────────────────────
# Probe — quick quality metrics
# ────────────────────────────────────────────────────────────


@main.command()
@pipeline_options
@click.option("--bytes", "n_bytes", default=256, type=click.IntRange(min=1), help="Bytes to collect.")
def probe(config_path, cells, first_length, fallback, seed, reset_ticks, n_bytes: int) -> None:
    """Collect output bytes and show quick quality stats (diagnostic only)."""
    from ring_trng.pipeline import PipelineStalled
    from ring_trng.stats import quick_quality

    pipe = _make_pipeline(config_path, cells, first_length, fallback, seed, reset_ticks)
    source = pipe.cells[0].source
    click.echo(f"Probing: {len(pipe.cells)} cell(s), lengths {pipe.config.cell_lengths}")
    click.echo(f"  Source: {source.name} — {source.description}")
    click.echo()

    t0 = time.monotonic()
    try:
        data = pipe.collect(n_bytes)
    except PipelineStalled as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    elapsed = time.monotonic() - t0

    quality = quick_quality(data, source.name)
    health = pipe.health_report()
    click.echo(f"  Grade:           {quality.get('grade', '?')}")
    click.echo(f"  Samples:         {quality.get('samples', 0):,}")
    click.echo(f"  Shannon entropy: {quality.get('shannon_entropy', 0):.4f} / 8.0 bits")
    click.echo(f"  Min-entropy:     {quality.get('min_entropy', 0):.4f}")
    click.echo(f"  Compression:     {quality.get('compression_ratio', 0):.4f}")
    click.echo(f"  Bit bias:        {quality.get('bit_bias', 0):+.4f}")
    click.echo(f"  Unique values:   {quality.get('unique_values', 0)}")
    click.echo(f"  Ticks:           {health['ticks']:,}")
    click.echo(f"  Accepted bits:   {health['accepted_bits']:,} (discarded pairs {health['discarded_pairs']:,})")
    click.echo(f"  Time:            {elapsed:.3f}s")


# ────────────────────────────────────────────────────────────
# Helpers
# ────────────────────────────────────────────────────────────


def _make_pipeline(config_path, cells, first_length, fallback, seed, reset_ticks):
    """Build a pipeline from the config file plus command-line overrides, then reset it."""
    from ring_trng.pipeline import TrngPipeline

    try:
        cfg = load_config(config_path) if config_path else TrngConfig()
        if cells is not None:
            cfg.cell_count = cells
        if first_length is not None:
            cfg.first_cell_length = first_length
        if fallback is not None:
            cfg.use_fallback_source = fallback
        if seed is not None:
            cfg.seed = seed
        pipe = TrngPipeline(cfg)
        if cfg.logging:
            get_logger("ring_trng.pipeline", cfg.logging)
    except (ConfigurationError, FileNotFoundError) as e:
        raise click.UsageError(str(e)) from e

    for _ in range(max(reset_ticks, 0)):
        pipe.advance(reset=True, enable=False)
    return pipe
