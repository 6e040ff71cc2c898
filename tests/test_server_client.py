"""Unit tests for ServerClient."""

import httpx
import pytest

from cli.server_client import ServerClient

RECORD = {
    'public_id': 'pub123',
    'private_id': 'priv456',
    'name': 'test.txt',
    'size': 26,
    'email': '',
    'saved_at': '2026-01-01T12:00:00Z',
    'expires_at': '2026-01-02T12:00:00Z',
}


def _client(temp_config, handler, sleeps=None):
    return ServerClient(
        temp_config,
        transport=httpx.MockTransport(handler),
        sleep=(sleeps.append if sleeps is not None else lambda _: None),
    )


def test_upload_success(temp_config, sample_file):
    seen = {}

    def handler(request):
        seen['path'] = request.url.path
        seen['body'] = request.read()
        return httpx.Response(201, json={'message': 'File saved successfully', 'data': RECORD})

    result = _client(temp_config, handler).upload(str(sample_file), 'me@example.com')

    assert 'File saved successfully' in result
    assert 'priv456' in result
    assert seen['path'] == '/files'
    assert b'Sample content for testing' in seen['body']
    assert b'text/plain' in seen['body']
    assert b'me@example.com' in seen['body']


def test_upload_conflict_shows_existing_record(temp_config, sample_file):
    def handler(request):
        return httpx.Response(409, json={'detail': 'The file already exists.', 'code': 'CONFLICT', 'data': RECORD})

    result = _client(temp_config, handler).upload(str(sample_file))

    assert 'already uploaded' in result
    assert 'pub123' in result


def test_upload_quota_message_passed_through(temp_config, sample_file):
    detail = 'The file size exceeds your available storage capacity. You have 1.50 MB left.'

    def handler(request):
        return httpx.Response(413, json={'detail': detail, 'code': 'QUOTA_EXCEEDED', 'remaining_bytes': 1572864})

    result = _client(temp_config, handler).upload(str(sample_file))

    assert detail in result


def test_upload_rate_limited(temp_config, sample_file):
    def handler(request):
        return httpx.Response(429, json={'detail': 'Too many requests.', 'code': 'RATE_LIMITED'})

    result = _client(temp_config, handler).upload(str(sample_file))

    assert 'Wait a minute' in result


def test_upload_missing_file(temp_config, tmp_path):
    def handler(request):
        raise AssertionError("no request expected")

    result = _client(temp_config, handler).upload(str(tmp_path / 'nope.txt'))

    assert 'File not found' in result


def test_upload_empty_file(temp_config, tmp_path):
    empty = tmp_path / 'empty.txt'
    empty.write_bytes(b'')

    def handler(request):
        raise AssertionError("no request expected")

    assert 'File is empty' in _client(temp_config, handler).upload(str(empty))


def test_retries_get_on_bare_server_error_with_backoff(temp_config):
    attempts = []
    sleeps = []

    def handler(request):
        attempts.append(request.headers['X-Request-ID'])
        if len(attempts) < 3:
            return httpx.Response(502, text='Bad Gateway')
        return httpx.Response(200, json={'data': RECORD})

    result = _client(temp_config, handler, sleeps).info('priv456')

    assert 'test.txt' in result
    assert len(attempts) == 3
    assert len(set(attempts)) == 1
    assert sleeps == [1, 2]


def test_get_with_server_error_code_not_retried(temp_config):
    attempts = []

    def handler(request):
        attempts.append(request)
        return httpx.Response(500, json={'detail': 'Inconsistent state.', 'code': 'CORRUPTION'})

    result = _client(temp_config, handler).info('priv456')

    assert 'inconsistency' in result
    assert len(attempts) == 1


def test_delete_corruption_reported_and_not_resent(temp_config):
    attempts = []
    sleeps = []

    def handler(request):
        attempts.append(request)
        if len(attempts) == 1:
            return httpx.Response(500, json={'detail': 'Error deleting file from system.', 'code': 'CORRUPTION'})
        return httpx.Response(404, json={'detail': 'File not found.', 'code': 'FILE_NOT_FOUND'})

    result = _client(temp_config, handler, sleeps).delete('priv456')

    assert result == 'Delete failed: The server found an inconsistency for this file. Please report it.'
    assert len(attempts) == 1
    assert sleeps == []


def test_upload_scanner_unavailable_sent_once(temp_config, sample_file):
    attempts = []
    sleeps = []

    def handler(request):
        attempts.append(request)
        return httpx.Response(503, json={'detail': 'Scanner unavailable.', 'code': 'SCAN_UNAVAILABLE'})

    result = _client(temp_config, handler, sleeps).upload(str(sample_file))

    assert 'scanner is unavailable' in result
    assert len(attempts) == 1
    assert sleeps == []


@pytest.mark.parametrize("status_code,code", [
    (500, 'STORAGE_ERROR'),
    (507, 'HOST_STORAGE_FULL'),
    (502, None),
])
def test_upload_server_errors_never_resent(temp_config, sample_file, status_code, code):
    attempts = []

    def handler(request):
        attempts.append(request)
        if code is None:
            return httpx.Response(status_code, text='Bad Gateway')
        return httpx.Response(status_code, json={'detail': 'Storage problem.', 'code': code})

    result = _client(temp_config, handler).upload(str(sample_file))

    assert result.startswith('Upload failed:')
    assert len(attempts) == 1


def test_upload_read_timeout_not_resent(temp_config, sample_file):
    attempts = []

    def handler(request):
        attempts.append(request)
        raise httpx.ReadTimeout("slow", request=request)

    result = _client(temp_config, handler).upload(str(sample_file))

    assert 'timed out' in result
    assert len(attempts) == 1


def test_no_retry_on_client_error(temp_config):
    attempts = []

    def handler(request):
        attempts.append(request)
        return httpx.Response(404, json={'detail': 'File not found.', 'code': 'FILE_NOT_FOUND'})

    result = _client(temp_config, handler).delete('priv456')

    assert result == 'Delete failed: File not found on server.'
    assert len(attempts) == 1


def test_connection_error_after_retries(temp_config):
    sleeps = []

    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    result = _client(temp_config, handler, sleeps).erase()

    assert 'Cannot connect' in result
    assert len(sleeps) == 3


def test_download_writes_file_with_server_name(temp_config, tmp_path):
    def handler(request):
        assert request.url.path == '/files/pub123/download'
        return httpx.Response(
            200,
            content=b'file body',
            headers={'Content-Disposition': 'attachment; filename="report.pdf"'},
        )

    result = _client(temp_config, handler).download('pub123', str(tmp_path))

    assert 'Downloaded: report.pdf' in result
    assert (tmp_path / 'report.pdf').read_bytes() == b'file body'


def test_download_not_found(temp_config, tmp_path):
    def handler(request):
        return httpx.Response(404, json={'detail': 'File not found.', 'code': 'FILE_NOT_FOUND'})

    result = _client(temp_config, handler).download('missing', str(tmp_path / 'out.bin'))

    assert result == 'Error: File not found on server.'
    assert not (tmp_path / 'out.bin').exists()


def test_info_and_me(temp_config):
    def handler(request):
        if request.url.path == '/files/info':
            assert request.url.params['private_id'] == 'priv456'
            return httpx.Response(200, json={'data': RECORD})
        return httpx.Response(200, json={
            'files': ['pub123'],
            'files_count': 1,
            'used_bytes': 2048,
            'remaining_bytes': 78641152,
            'created_at': '2026-01-01T12:00:00Z',
            'expires_at': '2026-01-02T12:00:00Z',
        })

    client = _client(temp_config, handler)

    assert 'test.txt' in client.info('priv456')
    me = client.me()
    assert 'Files:     1' in me
    assert '2.00 KiB' in me
    assert 'pub123' in me


def test_me_without_record(temp_config):
    def handler(request):
        return httpx.Response(404, json={'detail': 'No data.', 'code': 'CLIENT_NOT_FOUND'})

    assert _client(temp_config, handler).me() == 'Error: You have no data stored on this server.'


@pytest.mark.parametrize("status_code,expected", [
    (503, 'Service unavailable'),
    (507, 'Insufficient storage'),
])
def test_format_error_falls_back_to_status(temp_config, status_code, expected):
    client = _client(temp_config, lambda request: httpx.Response(status_code))

    assert client._format_error(httpx.Response(status_code, text='')) == expected
