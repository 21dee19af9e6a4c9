"""
Validated request variants, one per library operation.

Hosts pass untyped mappings to the library. Once the request validator
accepts a mapping, the library converts it to one of these models so the
operation body works with exactly the fields it needs. Field aliases are the
request keys (``patronId``, ``nCopies``).
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .book import DEFAULT_COPIES, Book


class _Request(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class AddBookRequest(_Request):
    """Fields of a book to add to the catalog."""

    isbn: str
    title: str
    authors: tuple[str, ...] = Field(..., min_length=1)
    pages: int = Field(..., gt=0)
    year: int = Field(..., gt=0)
    publisher: str
    n_copies: int = Field(default=DEFAULT_COPIES, alias="nCopies", gt=0)

    @field_validator("pages", "year", "n_copies", mode="before")
    @classmethod
    def integral_float_to_int(cls, v):
        """Integral floats of any magnitude become ints."""
        if isinstance(v, float) and v.is_integer():
            return int(v)
        return v

    def to_book(self) -> Book:
        return Book(
            isbn=self.isbn,
            title=self.title,
            authors=self.authors,
            pages=self.pages,
            year=self.year,
            publisher=self.publisher,
            n_copies=self.n_copies,
        )


class FindBooksRequest(_Request):
    """Catalog search."""

    search: str
    words: tuple[str, ...] = Field(
        ...,
        min_length=1,
        description="Lower-cased search words of length > 1",
    )


class CirculationRequest(_Request):
    """A patron acting on one book."""

    patron_id: str = Field(..., alias="patronId", min_length=1)
    isbn: str


class CheckoutBookRequest(CirculationRequest):
    """Patron borrows a copy of a book."""


class ReturnBookRequest(CirculationRequest):
    """Patron hands a copy back."""
