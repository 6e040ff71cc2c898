"""Tests for the file host API endpoints."""

import pytest
from fastapi.testclient import TestClient

from filehost.main import create_app
from filehost.types import ScanResult
from helpers import ENCRYPTION_KEY, EXCLUSION_KEY

CLIENT_X = {"CF-Connecting-IP": "198.51.100.1"}
CLIENT_Y = {"CF-Connecting-IP": "198.51.100.2"}
PDF = ("doc.pdf", b"%PDF-1.4 endpoint test", "application/pdf")


@pytest.fixture
def client(database, store, scanner, clock):
    """Create FastAPI test client."""
    app = create_app(
        database=database,
        store=store,
        scanner=scanner,
        encryption_key=ENCRYPTION_KEY,
        exclusion_key=EXCLUSION_KEY,
        allowed_origin="http://allowed.example",
        clock=clock,
    )
    return TestClient(app)


def test_app_refuses_to_start_without_secrets(database, store, scanner):
    with pytest.raises(ValueError):
        create_app(database=database, store=store, scanner=scanner, encryption_key="", exclusion_key="")


def _upload(client, headers=CLIENT_X, file=PDF, email=None):
    data = {"email": email} if email is not None else None
    return client.post("/files", files={"file": file}, data=data, headers=headers)


def test_root_endpoint(client):
    response = client.get('/')
    assert response.status_code == 200
    assert response.json()['status'] == 'running'


def test_health_endpoint(client):
    response = client.get('/health')
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "database": "ok"}


def test_request_id_header(client):
    response = client.get('/')
    assert response.headers['X-Request-ID']


def test_upload_returns_record(client):
    response = _upload(client, email="me@example.com")

    assert response.status_code == 201
    body = response.json()
    assert body['message'] == 'File saved successfully'
    assert body['data']['name'] == 'doc.pdf'
    assert body['data']['size'] == len(PDF[1])
    assert body['data']['email'] == 'me@example.com'
    assert len(body['data']['public_id']) == 64
    assert len(body['data']['private_id']) == 64


def test_upload_disallowed_type(client):
    response = _upload(client, file=("run.exe", b"MZ", "application/x-msdownload"))

    assert response.status_code == 400
    assert response.json()['code'] == 'INVALID_INPUT'


def test_upload_bad_email_same_message_as_bad_type(client):
    bad_type = _upload(client, file=("run.exe", b"MZ", "application/x-msdownload")).json()
    bad_email = _upload(client, email="nope").json()

    assert bad_email['detail'] == bad_type['detail']
    assert bad_email['code'] == 'INVALID_INPUT'


def test_upload_infected(client, scanner):
    scanner.result = ScanResult.INFECTED

    response = _upload(client)

    assert response.status_code == 400
    assert response.json()['code'] == 'INFECTED'


def test_upload_scanner_unavailable(client, scanner):
    scanner.result = ScanResult.ERROR

    response = _upload(client)

    assert response.status_code == 503
    assert response.json()['code'] == 'SCAN_UNAVAILABLE'


def test_duplicate_upload_is_conflict_with_existing_record(client):
    first = _upload(client).json()['data']

    response = _upload(client)

    assert response.status_code == 409
    body = response.json()
    assert body['code'] == 'CONFLICT'
    assert body['data']['public_id'] == first['public_id']


def test_rate_limited_after_five_calls(client):
    for i in range(5):
        response = _upload(client, file=(f"f{i}.txt", f"body {i}".encode(), "text/plain"))
        assert response.status_code == 201

    response = _upload(client, file=("f5.txt", b"body 5", "text/plain"))

    assert response.status_code == 429
    assert response.json()['code'] == 'RATE_LIMITED'


def test_download(client):
    public_id = _upload(client).json()['data']['public_id']

    response = client.get(f"/files/{public_id}/download", headers=CLIENT_X)

    assert response.status_code == 200
    assert response.content == PDF[1]
    assert response.headers['content-disposition'] == 'attachment; filename="doc.pdf"'


def test_download_unknown(client):
    response = client.get(f"/files/{'0' * 64}/download", headers=CLIENT_X)

    assert response.status_code == 404
    assert response.json()['code'] == 'FILE_NOT_FOUND'


def test_file_info(client):
    record = _upload(client).json()['data']

    response = client.get("/files/info", params={"private_id": record['private_id']}, headers=CLIENT_X)

    assert response.status_code == 200
    assert response.json()['data']['public_id'] == record['public_id']


def test_file_info_missing_identifier(client):
    response = client.get("/files/info", headers=CLIENT_X)

    assert response.status_code == 400
    assert response.json()['code'] == 'INVALID_INPUT'


def test_delete_then_download_not_found(client):
    record = _upload(client).json()['data']

    response = client.delete(f"/files/{record['private_id']}", headers=CLIENT_X)
    assert response.status_code == 200
    assert response.json() == {"message": "File deleted successfully"}

    response = client.get(f"/files/{record['public_id']}/download", headers=CLIENT_X)
    assert response.status_code == 404


def test_delete_from_other_address_not_found(client):
    record = _upload(client).json()['data']

    response = client.delete(f"/files/{record['private_id']}", headers=CLIENT_Y)

    assert response.status_code == 404


def test_cross_client_download_after_delete(client):
    record = _upload(client, headers=CLIENT_X).json()['data']
    assert _upload(client, headers=CLIENT_Y).status_code == 201

    client.delete(f"/files/{record['private_id']}", headers=CLIENT_X)

    assert client.get(f"/files/{record['public_id']}/download", headers=CLIENT_X).status_code == 404
    response = client.get(f"/files/{record['public_id']}/download", headers=CLIENT_Y)
    assert response.status_code == 200
    assert response.content == PDF[1]


def test_clients_me(client):
    record = _upload(client).json()['data']

    response = client.get("/clients/me", headers=CLIENT_X)

    assert response.status_code == 200
    body = response.json()
    assert body['files'] == [record['public_id']]
    assert body['files_count'] == 1
    assert body['used_bytes'] == len(PDF[1])
    assert 'identity' not in body


def test_clients_me_unknown(client):
    response = client.get("/clients/me", headers=CLIENT_Y)

    assert response.status_code == 404
    assert response.json()['code'] == 'CLIENT_NOT_FOUND'


def test_erase_all(client):
    record = _upload(client).json()['data']

    response = client.delete("/clients/me", headers=CLIENT_X)

    assert response.status_code == 200
    assert response.json() == {"message": "All of your data has been erased"}
    assert client.get("/clients/me", headers=CLIENT_X).status_code == 404
    assert client.get(f"/files/{record['public_id']}/download", headers=CLIENT_X).status_code == 404


def test_socket_address_used_without_proxy_header(client):
    assert _upload(client, headers={}).status_code == 201
    assert client.get("/clients/me").status_code == 200
    assert client.get("/clients/me", headers=CLIENT_X).status_code == 404


def test_cors_allows_configured_origin(client):
    response = client.options(
        "/files",
        headers={"Origin": "http://allowed.example", "Access-Control-Request-Method": "POST"},
    )

    assert response.status_code == 200
    assert response.headers['access-control-allow-origin'] == 'http://allowed.example'
