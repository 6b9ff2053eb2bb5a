import logging
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parent.parent
SRC_ROOT = REPO_ROOT / "src"
for path in (SRC_ROOT, REPO_ROOT):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))


@pytest.fixture(autouse=True)
def configure_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    data_dir = tmp_path / "data"
    monkeypatch.setenv("DATA_DIR", str(data_dir))
    monkeypatch.setenv("EXPERIMENT_ID", "test-exp")
    monkeypatch.setenv("LPC_KILOBYTES", "32")
    monkeypatch.setenv("LPC_TOKENIZER", "lines")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    yield
    # CLI runs point the root handler at a captured stream that is closed afterwards
    logging.basicConfig(level=logging.WARNING, force=True)
