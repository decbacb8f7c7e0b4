"""
Tests for the MockGate service object.
"""

import logging
import os
from pathlib import Path

import pytest
import requests

from mockgate.capture.request_log import LogMode
from mockgate.mock.gate import DEFAULT_BYPASS_MARKER, MockConfig, MockGate
from mockgate.mock.interceptor import InterceptedRequest
from mockgate.mock.models import (
    DirectKey,
    DirectLocation,
    GraphQLKey,
    Intercept,
    NamedResource,
    PassThrough,
    RequestMethod,
)
from mockgate.transport.httpx_transport import AsyncMockTransport, MockTransport
from mockgate.transport.requests_adapter import MockAdapter

USERS_URL = 'https://api.example.com/users'
GRAPHQL_URL = 'https://api.example.com/graphql'


class TestMockConfig:
    """Test MockConfig defaults and environment loading."""

    def test_defaults(self):
        config = MockConfig()

        assert config.resource_dirs == []
        assert config.test_resource_dirs == []
        assert config.resource_extension == '.json'
        assert config.content_type == 'application/json'
        assert config.bypass_marker == DEFAULT_BYPASS_MARKER
        assert config.log_level == 'warning'

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv('MOCKGATE_RESOURCE_DIRS', os.pathsep.join(['app/a', 'app/b']))
        monkeypatch.setenv('MOCKGATE_TEST_RESOURCE_DIRS', 'tests/fixtures')
        monkeypatch.setenv('MOCKGATE_LOG_LEVEL', 'info')

        config = MockConfig.from_env()

        assert config.resource_dirs == ['app/a', 'app/b']
        assert config.test_resource_dirs == ['tests/fixtures']
        assert config.log_level == 'info'

    def test_from_env_unset(self, monkeypatch):
        for name in ('MOCKGATE_RESOURCE_DIRS', 'MOCKGATE_TEST_RESOURCE_DIRS', 'MOCKGATE_LOG_LEVEL'):
            monkeypatch.delenv(name, raising=False)

        config = MockConfig.from_env()

        assert config.resource_dirs == []
        assert config.log_level == 'warning'


class TestRegistration:
    """Test register_mock and register_graphql_mock."""

    def test_register_mock_with_resource_name(self, gate):
        response = gate.register_mock(USERS_URL, 200, method='GET', payload='users_success')

        assert response.source == NamedResource('users_success')
        buckets = gate.registry.lookup(DirectKey(USERS_URL, RequestMethod.GET))
        assert buckets == {200: (response,)}

    def test_register_mock_defaults_to_all(self, gate):
        gate.register_mock(USERS_URL, 200, payload='users_success')

        assert gate.registry.contains(DirectKey(USERS_URL, RequestMethod.ALL))

    def test_register_mock_with_path(self, gate, fixtures_dir):
        path = fixtures_dir / 'app' / 'products.json'

        response = gate.register_mock(USERS_URL, 200, payload=path)

        assert response.source == DirectLocation(str(path))
        assert gate.load_payload(response) == path.read_bytes()

    def test_register_mock_requires_payload(self, gate):
        with pytest.raises(TypeError):
            gate.register_mock(USERS_URL, 200)

        assert len(gate.registry) == 0

    def test_register_mock_rejects_negative_delay(self, gate):
        with pytest.raises(ValueError):
            gate.register_mock(USERS_URL, 200, payload='users_success', response_delay=-0.5)

    def test_register_graphql_mock(self, gate):
        response = gate.register_graphql_mock('GetUser', GRAPHQL_URL, 200, 'get_user')

        assert response.identifier == 'GetUser'
        assert gate.registry.contains(GraphQLKey(GRAPHQL_URL, 'GetUser'))

    def test_resolve_through_gate(self, gate):
        gate.register_graphql_mock('GetUser', GRAPHQL_URL, 200, 'get_user')

        hit = gate.resolve(InterceptedRequest('POST', GRAPHQL_URL, body=b'{"operationName": "GetUser"}'))
        miss = gate.resolve(InterceptedRequest('POST', GRAPHQL_URL, body=b'{"operationName": "Other"}'))

        assert isinstance(hit, Intercept)
        assert hit.status_code == 200
        assert isinstance(miss, PassThrough)


class TestLoadSuite:
    """Test MockGate.load_suite."""

    def test_load_suite_from_path(self, gate, tmp_path, fixtures_dir):
        suite_path = tmp_path / 'suite.yaml'
        suite_path.write_text(
            'name: smoke\n'
            'mocks:\n'
            f'  - url: {USERS_URL}\n'
            '    method: GET\n'
            '    resource: users_success\n'
            f'  - url: {USERS_URL}\n'
            '    method: POST\n'
            '    status: 201\n'
            f'    file: {fixtures_dir / "app" / "products.json"}\n'
            f'  - url: {GRAPHQL_URL}\n'
            '    operation: GetUser\n'
            '    resource: get_user\n',
            encoding='utf-8'
        )

        assert gate.load_suite(suite_path) == 3

        get_result = gate.resolve(InterceptedRequest('GET', USERS_URL))
        post_result = gate.resolve(InterceptedRequest('POST', USERS_URL, body=b'{}'))
        graphql_result = gate.resolve(
            InterceptedRequest('POST', GRAPHQL_URL, body=b'{"operationName": "GetUser"}')
        )

        assert get_result.status_code == 200
        assert post_result.status_code == 201
        assert graphql_result.response.identifier == 'GetUser'

    def test_load_suite_applies_body_predicate(self, gate, tmp_path):
        suite_path = tmp_path / 'conflict.yaml'
        suite_path.write_text(
            'mocks:\n'
            f'  - url: {USERS_URL}\n'
            '    method: POST\n'
            '    status: 409\n'
            '    resource: user_not_found\n'
            '    body_contains:\n'
            '      $.email: taken@example.com\n',
            encoding='utf-8'
        )
        gate.load_suite(str(suite_path))

        taken = InterceptedRequest('POST', USERS_URL, body=b'{"email": "taken@example.com"}')
        free = InterceptedRequest('POST', USERS_URL, body=b'{"email": "free@example.com"}')

        assert gate.resolve(taken).status_code == 409
        assert isinstance(gate.resolve(free), PassThrough)


class TestLifecycle:
    """Test clearing, logging configuration and transport factories."""

    def test_clear_all_mocks_keeps_logging(self, gate):
        records = []
        gate.configure_logging(LogMode.COMPACT, callback=records.append)
        gate.register_mock(USERS_URL, 200, payload='users_success')

        gate.clear_all_mocks()

        assert len(gate.registry) == 0
        assert gate.logging_config.mode is LogMode.COMPACT
        assert gate.should_intercept(InterceptedRequest('GET', USERS_URL))

    def test_should_intercept_without_mocks_or_logging(self, gate):
        assert not gate.should_intercept(InterceptedRequest('GET', USERS_URL))

    def test_factories(self, gate):
        assert isinstance(gate.transport(), MockTransport)
        assert isinstance(gate.async_transport(), AsyncMockTransport)

        adapter = gate.adapter(pool_maxsize=4)
        assert isinstance(adapter, MockAdapter)
        assert isinstance(adapter, requests.adapters.HTTPAdapter)

    def test_log_level_applied(self):
        MockGate(MockConfig(log_level='error'))

        assert logging.getLogger('mockgate').level == logging.ERROR

    def test_context_manager_clears_registry(self):
        with MockGate(MockConfig(test_resource_dirs=[str(Path(__file__).parent / 'fixtures' / 'test')])) as gate:
            gate.register_mock(USERS_URL, 200, payload='users_success')
            assert len(gate.registry) == 1

        assert len(gate.registry) == 0
