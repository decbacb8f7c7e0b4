"""
MockGate Mock Suites

YAML-based mock definitions, so a test module can register a whole set of
mocks from one file.

Example suite:

    name: users
    mocks:
      - url: https://api.example.com/users
        method: GET
        status: 200
        resource: users_success
      - url: https://api.example.com/users
        method: POST
        status: 409
        file: fixtures/conflict.json
        delay: 0.1
        body_contains:
          $.email: taken@example.com
      - url: https://api.example.com/graphql
        operation: GetUser
        status: 200
        resource: get_user
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from ..common.errors import MockSuiteError
from .helpers import json_path_equals
from .models import (
    BodyPredicate,
    DirectLocation,
    NamedResource,
    PayloadSource,
    RequestMethod,
)


def _all_of(predicates: List[BodyPredicate]) -> BodyPredicate:
    def matches(body: Optional[bytes]) -> bool:
        return all(predicate(body) for predicate in predicates)

    return matches


@dataclass
class MockDefinition:
    """One mock entry of a suite."""

    url: str
    status: int
    source: PayloadSource
    method: RequestMethod = RequestMethod.ALL
    operation: Optional[str] = None
    delay: float = 0.0
    body_contains: Dict[str, Any] = field(default_factory=dict)
    id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base_dir: Optional[Path] = None) -> 'MockDefinition':
        """
        Create a definition from a suite entry.

        Relative ``file`` paths are resolved against ``base_dir``.

        Raises:
            MockSuiteError: If the entry is incomplete or inconsistent
        """
        if not isinstance(data, dict):
            raise MockSuiteError(f"Mock entry must be a mapping, got {type(data).__name__}")

        url = data.get('url')
        if not url:
            raise MockSuiteError(f"Mock entry is missing 'url': {data}")

        has_resource = 'resource' in data
        has_file = 'file' in data
        if has_resource == has_file:
            raise MockSuiteError(f"Mock entry for {url} needs exactly one of 'resource' or 'file'")

        if has_resource:
            source: PayloadSource = NamedResource(str(data['resource']))
        else:
            path = Path(str(data['file']))
            if base_dir is not None and not path.is_absolute():
                path = base_dir / path
            source = DirectLocation(str(path))

        try:
            method = RequestMethod.coerce(data.get('method', 'ALL'))
            status = int(data.get('status', 200))
            delay = float(data.get('delay', 0))
        except (TypeError, ValueError) as e:
            raise MockSuiteError(f"Invalid mock entry for {url}: {e}") from e

        if delay < 0:
            raise MockSuiteError(f"Mock entry for {url} has a negative delay")

        operation = data.get('operation')
        if operation is not None and 'method' in data:
            raise MockSuiteError(f"GraphQL mock entry for {url} cannot also set 'method'")

        body_contains = data.get('body_contains') or {}
        if not isinstance(body_contains, dict):
            raise MockSuiteError(f"'body_contains' for {url} must map JSONPath expressions to values")

        return cls(
            url=url,
            status=status,
            source=source,
            method=method,
            operation=operation,
            delay=delay,
            body_contains=body_contains,
            id=data.get('id')
        )

    def body_predicate(self) -> Optional[BodyPredicate]:
        """Build the body predicate for ``body_contains``, if any."""
        if not self.body_contains:
            return None
        try:
            predicates = [
                json_path_equals(expression, expected)
                for expression, expected in self.body_contains.items()
            ]
        except ValueError as e:
            raise MockSuiteError(f"Invalid 'body_contains' for {self.url}: {e}") from e
        return _all_of(predicates)


@dataclass
class MockSuite:
    """A named set of mock definitions."""

    name: str
    mocks: List[MockDefinition] = field(default_factory=list)

    @classmethod
    def from_yaml(cls, yaml_path: Union[str, Path]) -> 'MockSuite':
        """Load a suite from a YAML file; relative ``file`` paths are resolved next to it."""
        path = Path(yaml_path)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise MockSuiteError(f"Cannot read mock suite {path}: {e}") from e
        except yaml.YAMLError as e:
            raise MockSuiteError(f"Invalid YAML in mock suite {path}: {e}") from e

        return cls.from_dict(data or {}, base_dir=path.parent, default_name=path.stem)

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        base_dir: Optional[Path] = None,
        default_name: str = 'Unnamed Suite'
    ) -> 'MockSuite':
        """Create a suite from a dictionary."""
        if not isinstance(data, dict):
            raise MockSuiteError("Mock suite must be a mapping with a 'mocks' list")

        entries = data.get('mocks', [])
        if not isinstance(entries, list):
            raise MockSuiteError("'mocks' must be a list")

        return cls(
            name=data.get('name', default_name),
            mocks=[MockDefinition.from_dict(entry, base_dir=base_dir) for entry in entries]
        )
