"""
Result and error values returned by the lending library operations.

Operations never raise for bad requests. They return either an ``Ok``
wrapping the success value or an ``Err`` wrapping the first problem found:

- MISSING: a required field is absent from the request
- BAD_TYPE: a field is present but has the wrong primitive type
- BAD_REQ: a field is well-typed but breaks a business rule

Each ``AppError`` names the offending field in ``widget`` so a hosting
layer (form, CLI, HTTP handler) knows what to highlight.
"""

from enum import Enum
from typing import Any, Generic, Literal, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class ErrorCode(str, Enum):
    """Error codes, in the order the validator checks for them."""

    MISSING = "MISSING"
    BAD_TYPE = "BAD_TYPE"
    BAD_REQ = "BAD_REQ"


class AppError(BaseModel):
    """A single structured error."""

    code: ErrorCode = Field(..., description="Kind of failure")
    message: str = Field(..., description="Human readable description")
    widget: str | None = Field(
        default=None,
        description="Name of the request field responsible for the error",
    )

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    def __str__(self) -> str:
        if self.widget:
            return f"{self.code}: {self.message} [{self.widget}]"
        return f"{self.code}: {self.message}"


class LendingLibraryError(Exception):
    """Raised by ``Err.unwrap()`` for callers that prefer exceptions."""

    def __init__(self, errors: list[AppError]):
        self.errors = errors
        super().__init__("; ".join(str(e) for e in errors))


class Ok(BaseModel, Generic[T]):
    """Successful result carrying ``val``."""

    is_ok: Literal[True] = True
    val: T = None  # type: ignore[assignment]

    model_config = ConfigDict(frozen=True)

    def unwrap(self) -> T:
        return self.val


class Err(BaseModel):
    """Failed result carrying one or more errors."""

    is_ok: Literal[False] = False
    errors: list[AppError] = Field(..., min_length=1)

    model_config = ConfigDict(frozen=True)

    @property
    def error(self) -> AppError:
        """The first (and normally only) error."""
        return self.errors[0]

    @property
    def code(self) -> str:
        return self.errors[0].code

    @property
    def widget(self) -> str | None:
        return self.errors[0].widget

    def unwrap(self) -> Any:
        """
        Raise the carried errors.

        Raises:
            LendingLibraryError: always
        """
        raise LendingLibraryError(self.errors)


Result = Union[Ok, Err]


def ok(val: T) -> Ok[T]:
    """Wrap ``val`` in a successful result."""
    return Ok(val=val)


def err(code: ErrorCode, message: str, widget: str | None = None) -> Err:
    """Build a failed result holding a single error."""
    return Err(errors=[AppError(code=code, message=message, widget=widget)])


VOID_RESULT: Ok[None] = Ok(val=None)
