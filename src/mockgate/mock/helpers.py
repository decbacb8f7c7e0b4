"""
MockGate Body Match Helpers

Ready-made body predicates for MockResponse.body_matches.

Each helper returns a function taking the raw request body (or None) and
returning True when the body satisfies the condition. Malformed bodies
never raise; they simply do not match.
"""

from typing import Any, Callable, Dict, Optional

from jsonpath_ng.exceptions import JsonPathLexerError, JsonPathParserError
from jsonpath_ng.ext import parse as jsonpath_parse

from ..common.utils import extract_operation_name, safe_json_parse
from .models import BodyPredicate


def json_contains_object(predicate: Callable[[Dict[str, Any]], bool]) -> BodyPredicate:
    """
    Match JSON bodies containing an object accepted by ``predicate``.

    A top-level object is passed to the predicate directly; for a top-level
    array, any object element may satisfy it.

    Example:
        body_matches=json_contains_object(lambda obj: obj.get('id') == 42)
    """
    def matches(body: Optional[bytes]) -> bool:
        payload = safe_json_parse(body)
        if isinstance(payload, dict):
            return bool(predicate(payload))
        if isinstance(payload, list):
            return any(isinstance(item, dict) and predicate(item) for item in payload)
        return False

    return matches


def json_path_equals(expression: str, expected: Any) -> BodyPredicate:
    """
    Match JSON bodies where a JSONPath expression finds ``expected``.

    Args:
        expression: JSONPath expression, e.g. ``$.variables.id``
        expected: Value any of the matches must equal

    Raises:
        ValueError: If the expression is not valid JSONPath
    """
    try:
        compiled = jsonpath_parse(expression)
    except (JsonPathLexerError, JsonPathParserError) as e:
        raise ValueError(f"Invalid JSONPath expression '{expression}': {e}") from e

    def matches(body: Optional[bytes]) -> bool:
        payload = safe_json_parse(body)
        if payload is None:
            return False
        return any(match.value == expected for match in compiled.find(payload))

    return matches


def graphql_operation(name: str) -> BodyPredicate:
    """Match GraphQL request bodies whose ``operationName`` is ``name``."""
    def matches(body: Optional[bytes]) -> bool:
        return extract_operation_name(body) == name

    return matches


def body_contains(text: str) -> BodyPredicate:
    """Match bodies whose UTF-8 text contains ``text``."""
    def matches(body: Optional[bytes]) -> bool:
        if not body:
            return False
        return text in body.decode('utf-8', errors='ignore')

    return matches
