# ruff: noqa: B008
"""Synthetic token stream generator for LPC accuracy evaluation."""

from __future__ import annotations

import random
from pathlib import Path

import typer

app = typer.Typer(help="Generate token streams with a known number of distinct tokens.")


def generate_tokens(distinct: int, duplicate_rate: float, seed: int) -> list[str]:
    """Return a shuffled stream holding exactly ``distinct`` unique tokens."""

    rng = random.Random(seed)
    pool = [f"token-{i:08d}" for i in range(distinct)]
    stream = list(pool)
    stream.extend(rng.choice(pool) for _ in range(int(distinct * duplicate_rate)) if pool)
    rng.shuffle(stream)
    return stream


@app.command()
def main(
    distinct: int = typer.Option(10000, min=0, help="Number of distinct tokens"),
    duplicate_rate: float = typer.Option(
        0.5, min=0.0, help="Extra repeated tokens per distinct token"
    ),
    seed: int = typer.Option(20251009, help="Random seed"),
    out: Path = typer.Option(Path("{{DATA_DIR}}/streams/tokens.txt"), help="Output path"),
) -> None:
    """Emit one token per line."""

    out.parent.mkdir(parents=True, exist_ok=True)
    tokens = generate_tokens(distinct, duplicate_rate, seed)
    with out.open("w", encoding="utf-8") as fp:
        for token in tokens:
            fp.write(token + "\n")
    typer.echo(f"Wrote {len(tokens)} tokens ({distinct} distinct) to {out}")


if __name__ == "__main__":
    app()
