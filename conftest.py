import os
from types import SimpleNamespace

import pytest

from library import Library
from utils.ui_helpers import OUTPUT_MODE_ENV


@pytest.fixture(autouse=True)
def plain_output(monkeypatch):
    # Commands may switch the output mode through the environment; undo it per test.
    monkeypatch.setenv(OUTPUT_MODE_ENV, "plain")


@pytest.fixture
def lib():
    return Library()


@pytest.fixture
def data_files(tmp_path):
    """Paths for a books/members file pair inside a per-test directory."""
    files = SimpleNamespace(
        books=str(tmp_path / "books.csv"),
        members=str(tmp_path / "members.csv"),
    )
    yield files
    for path in (files.books, files.members):
        if os.path.exists(path):
            os.remove(path)
