"""
Tests for LendingLibrary.add_book.

These tests verify:
1. Stored records and the nCopies default
2. MISSING / BAD_TYPE / BAD_REQ for each field
3. Duplicate ISBN policies
"""

import logging

import pytest

from lending_library import DuplicateIsbnPolicy, ErrorCode, LendingLibrary, LibraryConfig

REQUIRED = ["isbn", "title", "authors", "pages", "year", "publisher"]


class TestAddBook:
    """Test adding books to the catalog."""

    def test_add_book_defaults_to_one_copy(self, library, effective_engineer):
        result = library.add_book(effective_engineer)

        assert result.is_ok
        book = result.val
        assert book.isbn == effective_engineer["isbn"]
        assert book.title == "The Effective Engineer"
        assert book.authors == ("Edmond Lau",)
        assert book.n_copies == 1
        assert library.books == (book,)
        assert library.get_book(book.isbn) == book

    def test_add_book_keeps_requested_copies(self, library, clean_code):
        result = library.add_book(clean_code)
        assert result.is_ok
        assert result.val.n_copies == 2

    def test_add_book_accepts_integral_floats(self, library, clean_code):
        result = library.add_book({**clean_code, "pages": 464.0})
        assert result.is_ok
        assert result.val.pages == 464

    @pytest.mark.parametrize("field", ["pages", "year", "nCopies"])
    def test_add_book_accepts_huge_integral_floats(self, library, effective_engineer, field):
        result = library.add_book({**effective_engineer, field: 1e20})
        assert result.is_ok
        assert getattr(result.val, "n_copies" if field == "nCopies" else field) == 10**20

    def test_add_book_does_not_alias_request(self, library, effective_engineer):
        book = library.add_book(effective_engineer).val
        effective_engineer["authors"].append("Someone Else")
        assert book.authors == ("Edmond Lau",)

    def test_add_book_logs(self, library, effective_engineer, caplog):
        with caplog.at_level(logging.INFO, logger="lending_library"):
            library.add_book(effective_engineer)
        assert "Book added" in caplog.text

    @pytest.mark.parametrize("field", REQUIRED)
    def test_missing_field(self, library, effective_engineer, field):
        del effective_engineer[field]
        result = library.add_book(effective_engineer)

        assert not result.is_ok
        assert result.code == ErrorCode.MISSING
        assert result.widget == field
        assert library.books == ()

    def test_first_missing_field_reported(self, library, effective_engineer):
        del effective_engineer["publisher"]
        del effective_engineer["title"]
        result = library.add_book(effective_engineer)
        assert result.code == ErrorCode.MISSING
        assert result.widget == "title"

    @pytest.mark.parametrize(
        "field,value",
        [
            ("isbn", 9780996128103),
            ("title", None),
            ("authors", []),
            ("authors", "Edmond Lau"),
            ("authors", ["Edmond Lau", 7]),
            ("pages", "222"),
            ("year", True),
            ("publisher", ["Effective Bookshelf"]),
            ("nCopies", "2"),
        ],
    )
    def test_bad_type(self, library, effective_engineer, field, value):
        result = library.add_book({**effective_engineer, field: value})
        assert result.code == ErrorCode.BAD_TYPE
        assert result.widget == field

    @pytest.mark.parametrize(
        "field,value",
        [
            ("pages", 0),
            ("pages", 22.5),
            ("year", -1),
            ("nCopies", 0),
            ("nCopies", 1.5),
        ],
    )
    def test_bad_request(self, library, effective_engineer, field, value):
        result = library.add_book({**effective_engineer, field: value})
        assert result.code == ErrorCode.BAD_REQ
        assert result.widget == field
        assert library.books == ()

    def test_type_error_beats_semantic_error(self, library, effective_engineer):
        result = library.add_book({**effective_engineer, "pages": 0, "publisher": 5})
        assert result.code == ErrorCode.BAD_TYPE
        assert result.widget == "publisher"


class TestDuplicateIsbn:
    """Test the configurable handling of an ISBN already in the catalog."""

    def make_library(self, policy: DuplicateIsbnPolicy) -> LendingLibrary:
        return LendingLibrary(LibraryConfig(_env_file=None, duplicate_isbn=policy))

    def test_append_keeps_both_entries(self, effective_engineer):
        library = self.make_library(DuplicateIsbnPolicy.APPEND)
        first = library.add_book(effective_engineer).val
        second = library.add_book({**effective_engineer, "nCopies": 3}).val

        assert library.books == (first, second)
        assert library.get_book(first.isbn) is first

    def test_reject(self, effective_engineer):
        library = self.make_library(DuplicateIsbnPolicy.REJECT)
        assert library.add_book(effective_engineer).is_ok

        result = library.add_book(effective_engineer)
        assert result.code == ErrorCode.BAD_REQ
        assert result.widget == "isbn"
        assert len(library.books) == 1

    def test_merge_adds_copies(self, effective_engineer):
        library = self.make_library(DuplicateIsbnPolicy.MERGE)
        library.add_book(effective_engineer)
        result = library.add_book({**effective_engineer, "nCopies": 2})

        assert result.is_ok
        assert result.val.n_copies == 3
        assert library.books == (result.val,)
        assert library.get_book(effective_engineer["isbn"]).n_copies == 3

    def test_merge_rejects_inconsistent_details(self, effective_engineer):
        library = self.make_library(DuplicateIsbnPolicy.MERGE)
        library.add_book(effective_engineer)
        result = library.add_book({**effective_engineer, "title": "Another Title"})

        assert result.code == ErrorCode.BAD_REQ
        assert result.widget == "isbn"
        assert library.get_book(effective_engineer["isbn"]).n_copies == 1

    def test_merge_keeps_outstanding_checkouts(self, effective_engineer):
        library = self.make_library(DuplicateIsbnPolicy.MERGE)
        isbn = effective_engineer["isbn"]
        library.add_book(effective_engineer)
        assert library.checkout_book({"patronId": "ann", "isbn": isbn}).is_ok
        assert not library.checkout_book({"patronId": "bob", "isbn": isbn}).is_ok

        library.add_book(effective_engineer)
        assert library.copies_out(isbn) == 1
        assert library.checkout_book({"patronId": "bob", "isbn": isbn}).is_ok
