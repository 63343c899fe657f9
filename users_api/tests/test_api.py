"""
Tests for the users API endpoints.
"""

import io
import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from logrouter import LogRouter, strip_ansi
from logrouter.formatters import parse_access_line
from users_api.api import USER, create_app


EXPECTED_USER = {
    'name': {'first': 'Matthew', 'last': 'Setter'},
    'id': 7,
    'employment': 'Freelance Technical Writer',
    'country': 'Germany',
    'languages': ['PHP', 'Node.js', 'Bash', 'Ruby', 'Python', 'Go'],
}


@pytest.fixture
def stream():
    return io.StringIO()


@pytest.fixture
def router(stream, tmp_path):
    router = LogRouter(stream=stream, log_file=str(tmp_path / 'info.log'))
    router.configure(production=False)
    return router


@pytest.fixture
def client(router):
    return TestClient(create_app(router))


def access_lines(stream):
    """Unstyled access lines written to the console stream"""
    lines = (strip_ansi(line) for line in stream.getvalue().splitlines())
    return [parse_access_line(line) for line in lines if parse_access_line(line)]


def test_get_users(client):
    """Should return the fixed user wrapped in a success envelope"""
    response = client.get('/api/v1/users')

    assert response.status_code == 200
    assert response.json() == {'success': True, 'error': None, 'data': EXPECTED_USER}


def test_get_users_ignores_headers_and_body(client):
    """Should return the same payload whatever the request carries"""
    response = client.request(
        'GET',
        '/api/v1/users',
        headers={'X-Anything': 'yes', 'Content-Type': 'application/json'},
        content=json.dumps({'id': 99}),
    )

    assert response.status_code == 200
    assert response.json()['data'] == EXPECTED_USER


def test_payload_not_mutated(client):
    """Should serve an unchanged payload across requests"""
    client.get('/api/v1/users')
    client.get('/api/v1/users')

    assert USER == EXPECTED_USER


def test_get_users_logs_payload(client, stream):
    """Should log the payload as an application record on the console"""
    client.get('/api/v1/users')

    first_record = stream.getvalue().split('\n}\n')[0] + '\n}'
    data = json.loads(first_record)

    assert data['origin'] == 'application'
    assert data['message'] == EXPECTED_USER


def test_access_line_per_request(client, stream):
    """Should write exactly one access line per request with the response status"""
    client.get('/api/v1/users')
    client.get('/api/v1/missing')

    lines = access_lines(stream)

    assert [(l['method'], l['url'], l['status']) for l in lines] == [
        ('GET', '/api/v1/users', 200),
        ('GET', '/api/v1/missing', 404),
    ]


def test_access_line_keeps_query_string(client, stream):
    """Should record the original url including its query"""
    client.get('/api/v1/users?page=2')

    assert access_lines(stream)[0]['url'] == '/api/v1/users?page=2'


def test_encoded_path_stays_on_one_line(client, stream):
    """Should log encoded newlines and spaces as sent, one well-formed line per request"""
    forged = '/x%0A%20200%20%20-%200.100%20ms%20-%20%20DELETE%20%20/admin'
    client.get(forged)
    client.get('/a%20b')

    lines = stream.getvalue().splitlines()
    assert len(lines) == 2

    parsed = [parse_access_line(strip_ansi(line)) for line in lines]
    assert all(p is not None for p in parsed)
    assert [p['url'] for p in parsed] == [forged, '/a%20b']
    assert [p['status'] for p in parsed] == [404, 404]


def test_method_not_allowed_logged(client, stream):
    """Should log unsupported methods with their 4xx status"""
    response = client.post('/api/v1/users', json={})

    assert response.status_code == 405
    line = access_lines(stream)[0]
    assert line['method'] == 'POST'
    assert line['status'] == 405


def test_cors_any_origin(client):
    """Should allow any origin"""
    response = client.get('/api/v1/users', headers={'Origin': 'https://example.org'})

    assert response.headers['access-control-allow-origin'] == '*'


def test_cors_preflight(client, stream):
    """Should answer preflight requests and access-log them"""
    response = client.options(
        '/api/v1/users',
        headers={
            'Origin': 'https://example.org',
            'Access-Control-Request-Method': 'PUT',
        },
    )

    assert response.status_code == 200
    assert 'PUT' in response.headers['access-control-allow-methods']
    assert access_lines(stream)[0]['method'] == 'OPTIONS'


def test_production_writes_file(stream, tmp_path):
    """Should write payload and stripped access line to the log file in production"""
    log_file = tmp_path / 'info.log'
    router = LogRouter(stream=stream, log_file=str(log_file))
    router.configure(production=True)

    TestClient(create_app(router)).get('/api/v1/users')
    router.close()

    content = log_file.read_text()
    assert content.startswith(json.dumps(EXPECTED_USER, indent=2) + '\n')
    assert '\x1b' not in content

    last_line = content.splitlines()[-1]
    console_last_line = stream.getvalue().splitlines()[-1]
    assert last_line == strip_ansi(console_last_line)
    assert parse_access_line(last_line)['status'] == 200


def test_no_file_outside_production(client, tmp_path):
    """Should not touch the log file outside production"""
    client.get('/api/v1/users')

    assert not Path(tmp_path / 'info.log').exists()
