"""
Book model for the lending library catalog.

A Book is created by ``LendingLibrary.add_book`` and never modified
afterwards. Its identity is the ISBN: two records with the same ISBN
describe the same title, whatever their other fields say.

Attributes use Python names; ``n_copies`` is serialized as ``nCopies`` to
match the request field name, and either name is accepted on construction.
"""

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_COPIES = 1


class Book(BaseModel):
    """An immutable catalog entry."""

    isbn: str = Field(
        ...,
        description="Catalog identifier of the book",
        examples=["978-0-13-468599-1", "0201633612"],
    )

    title: str = Field(
        ...,
        description="The title of the book",
        examples=["The Effective Engineer", "Clean Code"],
    )

    authors: tuple[str, ...] = Field(
        ...,
        description="Authors in credit order",
        min_length=1,
        examples=[["Edmond Lau"], ["Robert C. Martin"]],
    )

    pages: int = Field(..., description="Number of pages", gt=0)

    year: int = Field(..., description="Year of publication", gt=0)

    publisher: str = Field(..., description="Publisher name")

    n_copies: int = Field(
        default=DEFAULT_COPIES,
        alias="nCopies",
        description="Number of copies owned by the library; not affected by checkouts",
        gt=0,
    )

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "isbn": "978-0-13-468599-1",
                "title": "The Effective Engineer",
                "authors": ["Edmond Lau"],
                "pages": 222,
                "year": 2015,
                "publisher": "Effective Bookshelf",
                "nCopies": 2,
            }
        },
    )

    @property
    def search_text(self) -> str:
        """Lower-cased text that searches are matched against."""
        return " ".join([self.title, " ".join(self.authors), self.publisher]).lower()

    def same_edition(self, other: "Book") -> bool:
        """True when every descriptive field except the copy count matches."""
        return self.model_dump(exclude={"n_copies"}) == other.model_dump(exclude={"n_copies"})

    def to_dict(self) -> dict:
        """Serialize using request field names (``nCopies``)."""
        return self.model_dump(by_alias=True, mode="json")
