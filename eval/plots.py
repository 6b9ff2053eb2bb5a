# ruff: noqa: B008
"""Plot evaluation outputs for reporting."""

from __future__ import annotations

import json
from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import typer

from lincount import config as config_module

app = typer.Typer(help="Render evaluation plots from results.json")


@app.command()
def main(
    input: Path | None = typer.Option(
        None,
        help="Results JSON produced by evaluate.py "
        "(default: {{DATA_DIR}}/experiments/{{EXPERIMENT_ID}}/results.json)",
    ),
    out: Path | None = typer.Option(
        None, help="Directory for output figures (default: {{DATA_DIR}}/plots/{{EXPERIMENT_ID}})"
    ),
) -> None:
    cfg = config_module.AppConfig.from_env()
    if input is None:
        input = cfg.storage.data_dir / "experiments" / cfg.storage.experiment_id / "results.json"
    if out is None:
        out = cfg.storage.data_dir / "plots" / cfg.storage.experiment_id
    out.mkdir(parents=True, exist_ok=True)
    with input.open("r", encoding="utf-8") as fp:
        records = json.load(fp)

    grouped: dict[int, list[dict]] = {}
    for record in records:
        grouped.setdefault(record["kilobytes"], []).append(record)

    plt.figure(figsize=(6, 4))
    for kilobytes, entries in sorted(grouped.items()):
        entries.sort(key=lambda entry: entry["load_factor"])
        load = [entry["load_factor"] for entry in entries]
        error = [entry["relative_error"] for entry in entries]
        plt.plot(load, error, marker="o", label=f"{kilobytes} KiB")
    plt.xlabel("Load factor")
    plt.ylabel("Relative error")
    plt.title("LPC error vs load factor")
    plt.legend()
    plt.grid(True, alpha=0.3)
    plt.tight_layout()
    out_path = out / "error_vs_load_factor.png"
    plt.savefig(out_path)
    plt.close()
    typer.echo(f"Saved {out_path}")


if __name__ == "__main__":
    app()
