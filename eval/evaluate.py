# ruff: noqa: B008
"""Evaluation harness for LPC estimate accuracy across counter sizes."""

from __future__ import annotations

import json
from pathlib import Path

import typer

from lincount import config as config_module
from lincount.counter import LPCounter

app = typer.Typer(help="Sweep counter sizes and cardinalities and record the error.")


def evaluate_point(kilobytes: int, cardinality: int, seed: int) -> dict[str, float | int | bool]:
    counter = LPCounter(kilobytes)
    for i in range(cardinality):
        counter.put_bytes(f"{seed}:{i}".encode())
    estimate = counter.count()
    rel_error = abs(estimate - cardinality) / cardinality if cardinality else float(estimate)
    return {
        "kilobytes": kilobytes,
        "cardinality": cardinality,
        "estimate": estimate,
        "relative_error": rel_error,
        "load_factor": counter.load_factor,
        "saturated": counter.saturated,
    }


def default_output() -> Path:
    cfg = config_module.AppConfig.from_env()
    return cfg.storage.data_dir / "experiments" / cfg.storage.experiment_id / "results.json"


@app.command()
def main(
    sizes: list[int] = typer.Option([1, 4], help="Counter sizes in KiB to evaluate"),
    cardinalities: list[int] = typer.Option(
        [1000, 5000, 20000], help="True distinct counts to feed"
    ),
    seed: int = typer.Option(20251009, help="Token namespace seed"),
    out: Path | None = typer.Option(
        None, help="Output results path (default: {{DATA_DIR}}/experiments/{{EXPERIMENT_ID}})"
    ),
) -> None:
    target = out or default_output()
    target.parent.mkdir(parents=True, exist_ok=True)
    results = [
        evaluate_point(kilobytes, cardinality, seed)
        for kilobytes in sizes
        for cardinality in cardinalities
    ]
    with target.open("w", encoding="utf-8") as fp:
        json.dump(results, fp, indent=2)
    typer.echo(f"Wrote {len(results)} results to {target}")


if __name__ == "__main__":
    app()
