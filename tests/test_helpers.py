"""
Tests for MockGate body match helpers and JSON utilities.
"""

import json

import httpx
import pytest
import requests

from mockgate.common.utils import canonical_url, extract_operation_name, safe_json_parse, split_env_paths
from mockgate.mock.helpers import body_contains, graphql_operation, json_contains_object, json_path_equals


class TestJsonContainsObject:
    """Test json_contains_object."""

    def test_object_body(self):
        matches = json_contains_object(lambda obj: obj.get('id') == 42)

        assert matches(b'{"id": 42}')
        assert not matches(b'{"id": 7}')

    def test_array_body(self):
        matches = json_contains_object(lambda obj: obj.get('id') == 42)

        assert matches(b'[{"id": 1}, {"id": 42}]')
        assert not matches(b'[{"id": 1}, 42]')

    def test_invalid_bodies(self):
        matches = json_contains_object(lambda obj: True)

        assert not matches(None)
        assert not matches(b'')
        assert not matches(b'not json')
        assert not matches(b'"a string"')


class TestJsonPathEquals:
    """Test json_path_equals."""

    def test_nested_value(self):
        body = json.dumps({'operationName': 'GetUser', 'variables': {'id': '42'}}).encode()

        assert json_path_equals('$.variables.id', '42')(body)
        assert not json_path_equals('$.variables.id', '7')(body)

    def test_any_match(self):
        body = b'{"items": [{"sku": "a"}, {"sku": "b"}]}'

        assert json_path_equals('$.items[*].sku', 'b')(body)

    def test_missing_path(self):
        assert not json_path_equals('$.missing', 1)(b'{"present": 1}')

    def test_non_json(self):
        assert not json_path_equals('$.id', 1)(b'<xml/>')

    def test_invalid_expression(self):
        with pytest.raises(ValueError):
            json_path_equals('$[[', 1)


class TestOtherHelpers:
    """Test graphql_operation and body_contains."""

    def test_graphql_operation(self):
        matches = graphql_operation('GetUser')

        assert matches(b'{"operationName": "GetUser"}')
        assert not matches(b'{"operationName": "ListUsers"}')
        assert not matches(None)

    def test_body_contains(self):
        matches = body_contains('needle')

        assert matches(b'hay needle hay')
        assert not matches(b'hay')
        assert not matches(None)


class TestUtils:
    """Test common JSON utilities."""

    def test_safe_json_parse(self):
        assert safe_json_parse(b'{"a": 1}') == {'a': 1}
        assert safe_json_parse('[1, 2]') == [1, 2]
        assert safe_json_parse('{bad', default={}) == {}
        assert safe_json_parse(None, default='x') == 'x'
        assert safe_json_parse(b'\xff\xfe', default=None) is None

    def test_extract_operation_name(self):
        assert extract_operation_name(b'{"operationName": "GetUser"}') == 'GetUser'
        assert extract_operation_name(b'{"operationName": 5}') is None
        assert extract_operation_name(b'{"operationName": ""}') is None
        assert extract_operation_name(b'[{"operationName": "GetUser"}]') is None
        assert extract_operation_name(b'query { user }') is None
        assert extract_operation_name(None) is None

    def test_split_env_paths(self, monkeypatch):
        import os

        monkeypatch.setenv('MOCKGATE_TEST_PATHS', os.pathsep.join(['a', '', 'b']))

        assert split_env_paths('MOCKGATE_TEST_PATHS') == ['a', 'b']
        assert split_env_paths('MOCKGATE_UNSET_VARIABLE') == []

    def test_canonical_url(self):
        assert canonical_url('https://api.example.com') == 'https://api.example.com/'
        assert canonical_url('HTTPS://API.Example.com/users') == 'https://api.example.com/users'
        assert canonical_url('https://api.example.com:443/users') == 'https://api.example.com/users'
        assert canonical_url('http://localhost:8080/users') == 'http://localhost:8080/users'
        assert canonical_url('https://api.example.com/search?q=a b') == 'https://api.example.com/search?q=a%20b'
        assert canonical_url('https://api.example.com/users#top') == 'https://api.example.com/users'

    def test_canonical_url_is_stable(self):
        url = 'https://api.example.com/search?q=a%20b&tag=x'

        assert canonical_url(url) == url
        assert canonical_url(canonical_url('https://api.example.com/search?q=a b&tag=x')) == url

    def test_canonical_url_matches_prepared_requests(self):
        for url in ('https://api.example.com', 'https://api.example.com/search?q=a b'):
            prepared = requests.Request('GET', url).prepare()

            assert canonical_url(prepared.url) == canonical_url(url)
            assert canonical_url(str(httpx.URL(url))) == canonical_url(url)
