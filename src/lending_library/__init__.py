"""
Lending Library.

An in-memory catalog and circulation tracker for a small lending library.

Key Components:
- library: LendingLibrary, the catalog plus checkout tracking
- validation: the shared request validator
- errors: Ok/Err result values and error codes
- models: Pydantic models for books and validated requests
- config: settings with Pydantic v2
"""

__version__ = "0.1.0"

from .config import DuplicateIsbnPolicy, LibraryConfig, configure_logging, get_config, reset_config
from .errors import AppError, Err, ErrorCode, LendingLibraryError, Ok, Result
from .library import LendingLibrary, make_lending_library
from .models import Book

__all__ = [
    "__version__",
    "AppError",
    "Book",
    "DuplicateIsbnPolicy",
    "Err",
    "ErrorCode",
    "LendingLibrary",
    "LendingLibraryError",
    "LibraryConfig",
    "Ok",
    "Result",
    "configure_logging",
    "get_config",
    "make_lending_library",
    "reset_config",
]
