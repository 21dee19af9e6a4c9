"""
Lending library models.

- Book: an immutable catalog entry
- AddBookRequest, FindBooksRequest, CheckoutBookRequest, ReturnBookRequest:
  requests that have already passed validation
"""

from .book import DEFAULT_COPIES, Book
from .requests import (
    AddBookRequest,
    CheckoutBookRequest,
    CirculationRequest,
    FindBooksRequest,
    ReturnBookRequest,
)

__all__ = [
    "DEFAULT_COPIES",
    "AddBookRequest",
    "Book",
    "CheckoutBookRequest",
    "CirculationRequest",
    "FindBooksRequest",
    "ReturnBookRequest",
]
