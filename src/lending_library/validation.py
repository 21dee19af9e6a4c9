"""
Generic request validation shared by all library operations.

A request is an untyped mapping of field name to value. Validation runs in
two phases:

1. PRESENCE AND TYPE: for each field in the type checker, in declaration
   order, the field must be present (else MISSING) and its type predicate
   must accept it (else BAD_TYPE).
2. SEMANTICS: only once every field is well-typed, each field's rules run in
   order and the first failing rule yields BAD_REQ.

Only the first problem is reported, so the outcome for a request with
several problems is deterministic.
"""

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any, NamedTuple

from .errors import VOID_RESULT, ErrorCode, Result, err

logger = logging.getLogger(__name__)

Predicate = Callable[[Any], bool]


class Rule(NamedTuple):
    """A semantic predicate paired with the message reported when it fails."""

    test: Predicate
    message: str


TypeChecker = Mapping[str, Predicate]
SemanticChecker = Mapping[str, Sequence[Rule | Predicate]]


# =============================================================================
# TYPE PREDICATES
# =============================================================================

def is_string(x: Any) -> bool:
    return isinstance(x, str)


def is_number(x: Any) -> bool:
    """True for ints and floats. Booleans are not numbers here."""
    return isinstance(x, int | float) and not isinstance(x, bool)


def is_integral(x: Any) -> bool:
    if isinstance(x, float):
        return x.is_integer()
    return isinstance(x, int) and not isinstance(x, bool)


def is_positive(x: Any) -> bool:
    return x > 0


def is_non_empty_string(x: Any) -> bool:
    return isinstance(x, str) and x != ""


def is_non_empty_string_list(x: Any) -> bool:
    """A list or tuple with at least one element, all of them strings."""
    return isinstance(x, list | tuple) and len(x) > 0 and all(isinstance(s, str) for s in x)


# =============================================================================
# VALIDATOR
# =============================================================================

def _as_rule(field: str, rule: Rule | Predicate) -> Rule:
    if isinstance(rule, Rule):
        return rule
    return Rule(rule, f"invalid value for field '{field}'")


def validate(
    req: Mapping[str, Any],
    type_checker: TypeChecker,
    semantic_checker: SemanticChecker | None = None,
) -> Result:
    """
    Check ``req`` against the given checkers.

    Args:
        req: Untyped request mapping
        type_checker: Field name to type predicate, in the order fields are checked
        semantic_checker: Field name to ordered rules, run after all type checks pass

    Returns:
        VOID_RESULT when the request is valid, otherwise an Err holding the
        first failure with the field name as its widget
    """
    for key, type_ok in type_checker.items():
        if key not in req:
            logger.debug("Validation failed: missing field %s", key)
            return err(ErrorCode.MISSING, f"missing field '{key}'", widget=key)
        if not type_ok(req[key]):
            logger.debug("Validation failed: bad type for field %s", key)
            return err(
                ErrorCode.BAD_TYPE,
                f"field '{key}' has bad type {type(req[key]).__name__}",
                widget=key,
            )

    for key, rules in (semantic_checker or {}).items():
        for rule in rules:
            rule = _as_rule(key, rule)
            if not rule.test(req.get(key)):
                logger.debug("Validation failed: rule for field %s: %s", key, rule.message)
                return err(ErrorCode.BAD_REQ, rule.message, widget=key)

    return VOID_RESULT
