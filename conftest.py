import os
import sys
from pathlib import Path

import pytest

if sys.version_info < (3, 10):
    print(
        f"ERROR: This project requires Python 3.10+ (found {sys.version.split()[0]}).",
        file=sys.stderr,
    )
    sys.exit(1)


# Make `src` importable without an editable install.
ROOT_DIR = Path(__file__).parent.absolute()
src_dir = ROOT_DIR / "src"

if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))


@pytest.fixture(autouse=True)
def _isolate_chart_env(monkeypatch):
    """Keep CHART_EXPRESS_* variables from the developer shell out of tests."""
    for name in list(os.environ):
        if name.startswith("CHART_EXPRESS_"):
            monkeypatch.delenv(name, raising=False)
