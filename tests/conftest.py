import os

# No display in test runs
os.environ.setdefault("MPLBACKEND", "Agg")

import pytest


@pytest.fixture
def write_col(tmp_path):
    def write(name: str, text: str) -> str:
        path = tmp_path / name
        path.write_text(text)
        return str(path)
    return write
