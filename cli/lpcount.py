# ruff: noqa: B008
"""Command-line front-end for building, merging and inspecting LPC counters."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import BinaryIO, NoReturn

import typer
from pydantic import ValidationError

SRC_ROOT = Path(__file__).resolve().parent.parent / "src"

try:
    import lincount
    from lincount import config as config_module
    from lincount.counter import LPCounter, merge as merge_counters
    from lincount.errors import LincountError
    from lincount.hashing import VARIANTS, MurmurHash3
except ModuleNotFoundError:  # pragma: no cover - fallback when running from a checkout
    if str(SRC_ROOT) not in sys.path:
        sys.path.insert(0, str(SRC_ROOT))
    import lincount
    from lincount import config as config_module
    from lincount.counter import LPCounter, merge as merge_counters
    from lincount.errors import LincountError
    from lincount.hashing import VARIANTS, MurmurHash3

logger = logging.getLogger("lpcount")

__version__ = lincount.__version__


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"lpcount version {__version__}")
        raise typer.Exit()


app = typer.Typer(help="Estimate distinct counts with linear probabilistic counting.")


def _config() -> config_module.AppConfig:
    try:
        return config_module.AppConfig.from_env()
    except ValidationError as exc:
        _fail(f"Invalid configuration: {exc}")


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Logging level (default: {{LOG_LEVEL}})",
    ),
) -> None:
    """Linear probabilistic counter CLI."""
    settings = _config().log
    if log_level is not None:
        try:
            settings = config_module.LogSettings(level=log_level, format=settings.format)
        except ValueError as exc:
            raise typer.BadParameter(f"Unknown log level '{log_level}'.") from exc
    settings.apply()


def _fail(message: str) -> NoReturn:
    typer.echo(message, err=True)
    raise typer.Exit(code=1)


def _tokens(stream: BinaryIO, tokenizer: str) -> Iterator[bytes]:
    for line in stream:
        if tokenizer == "words":
            yield from line.split()
            continue
        token = line.rstrip(b"\r\n")
        if token:
            yield token


def _count_stream(counter: LPCounter, tokens: Iterable[bytes]) -> int:
    seen = 0
    for token in tokens:
        counter.put_bytes(token)
        seen += 1
    return seen


def _read_dump(path: Path) -> LPCounter:
    if not path.is_file():
        _fail(f"Dump not found: {path}")
    try:
        raw = path.read_bytes()
    except OSError as exc:
        _fail(f"Cannot read dump {path}: {exc}")
    return LPCounter.restore(raw)


def _write_dump(counter: LPCounter, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(counter.dump())
    logger.info("wrote %d KiB dump to %s", counter.size, path)


def _summary(counter: LPCounter) -> dict[str, object]:
    return {
        "size_kib": counter.size,
        "bit_length": counter.bit_length,
        "set_bits": counter.set_count,
        "load_factor": round(counter.load_factor, 6),
        "saturated": counter.saturated,
        "estimate": counter.count(),
    }


def _warn_if_saturated(counter: LPCounter) -> None:
    if counter.saturated:
        logger.warning(
            "counter is saturated; the estimate %d is a lower bound, use more than %d KiB",
            counter.count(),
            counter.size,
        )


@app.command()
def count(
    from_path: Path | None = typer.Option(
        None,
        "--from",
        "-f",
        help="Token source file; '-' or omitted reads stdin.",
    ),
    kilobytes: int | None = typer.Option(
        None,
        "--kilobytes",
        "-k",
        help="Counter size in KiB (default: {{LPC_KILOBYTES}})",
    ),
    tokenizer: str | None = typer.Option(
        None,
        "--tokenizer",
        "-t",
        help="Token mode [lines|words] (default: {{LPC_TOKENIZER}})",
    ),
    save: Path | None = typer.Option(None, "--save", "-o", help="Write the counter dump here."),
    as_json: bool = typer.Option(False, "--json", help="Print a JSON summary."),
) -> None:
    """Count distinct tokens read from a file or stdin."""

    cfg = _config()
    size = kilobytes if kilobytes is not None else cfg.counter.kilobytes
    mode = (tokenizer or cfg.counter.tokenizer).lower()
    if mode not in config_module.TOKENIZERS:
        raise typer.BadParameter("Tokenizer must be 'lines' or 'words'.")

    try:
        counter = LPCounter(size)
    except LincountError as exc:
        _fail(str(exc))

    if from_path is None or str(from_path) == "-":
        seen = _count_stream(counter, _tokens(typer.get_binary_stream("stdin"), mode))
    else:
        if not from_path.is_file():
            _fail(f"Input not found: {from_path}")
        with from_path.open("rb") as fp:
            seen = _count_stream(counter, _tokens(fp, mode))
    logger.info("read %d tokens into a %d KiB counter", seen, counter.size)
    _warn_if_saturated(counter)

    if save is not None:
        _write_dump(counter, save)
    if as_json:
        payload = _summary(counter)
        payload["tokens"] = seen
        typer.echo(json.dumps(payload, indent=2))
        return
    typer.echo(str(counter.count()))


@app.command()
def merge(
    dumps: list[Path] = typer.Argument(..., help="Counter dumps to union."),
    out: Path | None = typer.Option(None, "--out", "-o", help="Write the merged dump here."),
    as_json: bool = typer.Option(False, "--json", help="Print a JSON summary."),
) -> None:
    """Union several counter dumps and print the combined estimate."""

    try:
        merged = merge_counters(_read_dump(path) for path in dumps)
    except LincountError as exc:
        _fail(str(exc))
    _warn_if_saturated(merged)

    if out is not None:
        _write_dump(merged, out)
    if as_json:
        payload = _summary(merged)
        payload["inputs"] = [str(path) for path in dumps]
        typer.echo(json.dumps(payload, indent=2))
        return
    typer.echo(str(merged.count()))


@app.command()
def inspect(
    dump: Path = typer.Argument(..., help="Counter dump to describe."),
) -> None:
    """Describe a counter dump as JSON."""

    try:
        counter = _read_dump(dump)
    except LincountError as exc:
        _fail(str(exc))
    typer.echo(json.dumps(_summary(counter), indent=2))


@app.command(name="hash")
def hash_text(
    text: str = typer.Argument(..., help="Text to hash (UTF-8)."),
    variant: str = typer.Option("x64_128", "--variant", help="x64_128 | x86_128 | x86_32"),
    seed: int = typer.Option(0, "--seed", min=0, help="Hash seed"),
) -> None:
    """Print the MurmurHash3 digest of TEXT."""

    if variant not in VARIANTS:
        raise typer.BadParameter(f"Variant must be one of {', '.join(sorted(VARIANTS))}.")
    hasher = MurmurHash3(VARIANTS[variant], seed)
    hasher.update(text.encode("utf-8"))
    typer.echo(hasher.hexdigest())


if __name__ == "__main__":
    app()
