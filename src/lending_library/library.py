"""
In-memory catalog and circulation tracker.

``LendingLibrary`` owns two collections:

- the catalog, a list of Book records in the order they were added
- the checkout map, patron id to the books that patron currently holds,
  in borrow order

Every public operation takes an untyped request mapping, runs it through
the shared request validator and returns an ``Ok`` or ``Err`` value. No
request problem is ever raised as an exception.

Instances are independent; create one per library and pass it to callers.
Operations run to completion synchronously, so a host that shares an
instance between threads must serialize calls itself.
"""

import logging
import re
import unicodedata
from collections.abc import Mapping
from typing import Any

from .config import DuplicateIsbnPolicy, LibraryConfig, get_config
from .errors import VOID_RESULT, Err, ErrorCode, Result, err, ok
from .models import (
    DEFAULT_COPIES,
    AddBookRequest,
    Book,
    CheckoutBookRequest,
    FindBooksRequest,
    ReturnBookRequest,
)
from .validation import (
    Rule,
    is_integral,
    is_non_empty_string,
    is_non_empty_string_list,
    is_number,
    is_positive,
    is_string,
    validate,
)

logger = logging.getLogger(__name__)

WORD_RE = re.compile(r"\w+", re.ASCII)
MIN_WORD_LENGTH = 2


def search_words(text: str) -> list[str]:
    """Lower-cased words of ``text`` long enough to search on."""
    return [w for w in WORD_RE.findall(text.lower()) if len(w) >= MIN_WORD_LENGTH]


def title_sort_key(book: Book) -> tuple[str, str]:
    """Collation key for titles: accents and case are ignored first."""
    decomposed = unicodedata.normalize("NFKD", book.title)
    base = "".join(c for c in decomposed if not unicodedata.combining(c))
    return (base.casefold(), book.title)


# =============================================================================
# REQUEST CHECKERS
# =============================================================================

ADD_BOOK_TYPES = {
    "isbn": is_string,
    "title": is_string,
    "authors": is_non_empty_string_list,
    "pages": is_number,
    "year": is_number,
    "publisher": is_string,
    "nCopies": is_number,
}

ADD_BOOK_RULES = {
    field: [
        Rule(is_integral, f"{field} must be an integer"),
        Rule(is_positive, f"{field} must be greater than 0"),
    ]
    for field in ("pages", "year", "nCopies")
}

FIND_BOOKS_TYPES = {"search": is_string}

FIND_BOOKS_RULES = {
    "search": [
        Rule(
            lambda s: bool(search_words(s)),
            f"search must contain a word of at least {MIN_WORD_LENGTH} characters",
        ),
    ],
}

CIRCULATION_TYPES = {"patronId": is_string, "isbn": is_string}

PATRON_RULES = [Rule(is_non_empty_string, "patronId must not be empty")]


class LendingLibrary:
    """A single lending library's catalog and outstanding checkouts."""

    def __init__(self, config: LibraryConfig | None = None) -> None:
        self.config = config or get_config()
        self._books: list[Book] = []
        self._by_isbn: dict[str, Book] = {}
        self._checkouts: dict[str, list[Book]] = {}

    # -------------------------------------------------------------------------
    # Read helpers
    # -------------------------------------------------------------------------

    @property
    def books(self) -> tuple[Book, ...]:
        """Snapshot of the catalog in insertion order."""
        return tuple(self._books)

    def get_book(self, isbn: str) -> Book | None:
        """The first cataloged book with ``isbn``, if any."""
        return self._by_isbn.get(isbn)

    def checked_out(self, patron_id: str) -> list[Book]:
        """Books ``patron_id`` currently holds, in borrow order."""
        return list(self._checkouts.get(patron_id, []))

    def copies_out(self, isbn: str) -> int:
        return sum(
            1 for held in self._checkouts.values() for book in held if book.isbn == isbn
        )

    def copies_available(self, isbn: str) -> int:
        book = self.get_book(isbn)
        if book is None:
            return 0
        return book.n_copies - self.copies_out(isbn)

    def _in_stock(self, isbn: str) -> bool:
        return self.copies_available(isbn) > 0

    def _holds(self, patron_id: str, isbn: str) -> bool:
        return any(book.isbn == isbn for book in self._checkouts.get(patron_id, []))

    def _rejected(self, operation: str, failure: Err) -> Err:
        logger.info(
            "%s rejected | library=%s code=%s field=%s: %s",
            operation,
            self.config.library_name,
            failure.code,
            failure.widget,
            failure.error.message,
        )
        return failure

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def add_book(self, req: Mapping[str, Any]) -> Result:
        """
        Add one or more copies of the book described by ``req``.

        Errors:
            MISSING: a required field is absent
            BAD_TYPE: a field has the wrong type, or authors is empty
            BAD_REQ: pages, year or nCopies is not a positive integer, or the
                ISBN is already cataloged and the duplicate policy forbids it

        Returns:
            Ok holding the stored Book
        """
        req = {"nCopies": DEFAULT_COPIES, **req}
        validation = validate(req, ADD_BOOK_TYPES, ADD_BOOK_RULES)
        if not validation.is_ok:
            return self._rejected("add_book", validation)

        book = AddBookRequest.model_validate(req).to_book()
        existing = self.get_book(book.isbn)
        if existing is not None:
            return self._add_duplicate(existing, book)

        self._books.append(book)
        self._by_isbn[book.isbn] = book
        logger.info(
            "Book added | isbn=%s title=%s copies=%d", book.isbn, book.title, book.n_copies
        )
        return ok(book)

    def _add_duplicate(self, existing: Book, book: Book) -> Result:
        policy = self.config.duplicate_isbn

        if policy == DuplicateIsbnPolicy.REJECT:
            return self._rejected(
                "add_book",
                err(ErrorCode.BAD_REQ, f"book {book.isbn} is already in the library", "isbn"),
            )

        if policy == DuplicateIsbnPolicy.MERGE:
            if not existing.same_edition(book):
                return self._rejected(
                    "add_book",
                    err(
                        ErrorCode.BAD_REQ,
                        f"book {book.isbn} is already in the library with different details",
                        "isbn",
                    ),
                )
            merged = existing.model_copy(update={"n_copies": existing.n_copies + book.n_copies})
            self._books[self._books.index(existing)] = merged
            self._by_isbn[merged.isbn] = merged
            logger.info("Book copies merged | isbn=%s copies=%d", merged.isbn, merged.n_copies)
            return ok(merged)

        # append: lookups keep resolving to the first entry
        self._books.append(book)
        logger.info("Duplicate book appended | isbn=%s title=%s", book.isbn, book.title)
        return ok(book)

    def find_books(self, req: Mapping[str, Any]) -> Result:
        """
        Return all books matching every search word, sorted by title.

        A word is a maximal run of word characters of length > 1; a book
        matches when each word is a substring of its lower-cased title,
        authors and publisher.

        Errors:
            MISSING: search is absent
            BAD_TYPE: search is not a string
            BAD_REQ: search has no usable words
        """
        validation = validate(req, FIND_BOOKS_TYPES, FIND_BOOKS_RULES)
        if not validation.is_ok:
            return self._rejected("find_books", validation)

        params = FindBooksRequest(search=req["search"], words=search_words(req["search"]))
        matches = [
            book for book in self._books
            if all(word in book.search_text for word in params.words)
        ]
        matches.sort(key=title_sort_key)
        logger.debug("find_books | words=%s matches=%d", params.words, len(matches))
        return ok(matches)

    def checkout_book(self, req: Mapping[str, Any]) -> Result:
        """
        Check out a copy of book ``isbn`` to patron ``patronId``.

        Errors:
            MISSING: patronId or isbn is absent
            BAD_TYPE: patronId or isbn is not a string
            BAD_REQ: empty patronId, unknown book, no copy in stock, or the
                patron already holds this book
        """
        patron_id, isbn = req.get("patronId"), req.get("isbn")
        rules = {
            "patronId": PATRON_RULES,
            "isbn": [
                Rule(lambda x: self.get_book(x) is not None, f"unknown book {isbn}"),
                Rule(self._in_stock, f"no copies of book {isbn} in stock"),
                Rule(
                    lambda x: not self._holds(patron_id, x),
                    f"patron {patron_id} already has book {isbn} checked out",
                ),
            ],
        }
        validation = validate(req, CIRCULATION_TYPES, rules)
        if not validation.is_ok:
            return self._rejected("checkout_book", validation)

        params = CheckoutBookRequest.model_validate(req)
        book = self._by_isbn[params.isbn]
        self._checkouts.setdefault(params.patron_id, []).append(book)
        logger.info("Book checked out | patron=%s isbn=%s", params.patron_id, params.isbn)
        return VOID_RESULT

    def return_book(self, req: Mapping[str, Any]) -> Result:
        """
        Return book ``isbn`` previously checked out by patron ``patronId``.

        Errors:
            MISSING: patronId or isbn is absent
            BAD_TYPE: patronId or isbn is not a string
            BAD_REQ: empty patronId, unknown book, or the patron does not
                hold this book
        """
        patron_id, isbn = req.get("patronId"), req.get("isbn")
        rules = {
            "patronId": PATRON_RULES,
            "isbn": [
                Rule(lambda x: self.get_book(x) is not None, f"unknown book {isbn}"),
                Rule(
                    lambda x: self._holds(patron_id, x),
                    f"patron {patron_id} does not have book {isbn} checked out",
                ),
            ],
        }
        validation = validate(req, CIRCULATION_TYPES, rules)
        if not validation.is_ok:
            return self._rejected("return_book", validation)

        params = ReturnBookRequest.model_validate(req)
        held = self._checkouts[params.patron_id]
        # only the first matching entry; the list is kept even when emptied
        for i, book in enumerate(held):
            if book.isbn == params.isbn:
                del held[i]
                break
        logger.info("Book returned | patron=%s isbn=%s", params.patron_id, params.isbn)
        return VOID_RESULT


def make_lending_library(config: LibraryConfig | None = None) -> LendingLibrary:
    """Create an empty library."""
    return LendingLibrary(config)
