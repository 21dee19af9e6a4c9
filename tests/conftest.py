"""Test configuration and fixtures for the lending library.

Every test gets a fresh library and a clean shared configuration, so no
state leaks between tests.
"""

import os
from collections.abc import Generator
from unittest.mock import patch

import pytest

from lending_library import LendingLibrary, LibraryConfig, reset_config


@pytest.fixture(autouse=True)
def clean_config() -> Generator[None, None, None]:
    """Isolate tests from LENDING_LIBRARY_* variables and the shared config."""
    env = {k: v for k, v in os.environ.items() if not k.startswith("LENDING_LIBRARY_")}
    with patch.dict(os.environ, env, clear=True):
        reset_config()
        yield
    reset_config()


@pytest.fixture
def config() -> LibraryConfig:
    return LibraryConfig(_env_file=None)


@pytest.fixture
def library(config: LibraryConfig) -> LendingLibrary:
    """An empty library."""
    return LendingLibrary(config)


@pytest.fixture
def effective_engineer() -> dict:
    return {
        "isbn": "978-0-9961281-0-3",
        "title": "The Effective Engineer",
        "authors": ["Edmond Lau"],
        "pages": 222,
        "year": 2015,
        "publisher": "Effective Bookshelf",
    }


@pytest.fixture
def clean_code() -> dict:
    return {
        "isbn": "978-0-13-235088-4",
        "title": "Clean Code",
        "authors": ["Robert C. Martin"],
        "pages": 464,
        "year": 2008,
        "publisher": "Prentice Hall",
        "nCopies": 2,
    }


@pytest.fixture
def stocked_library(
    library: LendingLibrary, effective_engineer: dict, clean_code: dict
) -> LendingLibrary:
    """A library holding two titles: one single copy, one with two copies."""
    assert library.add_book(effective_engineer).is_ok
    assert library.add_book(clean_code).is_ok
    return library
