"""Tests for the fixed-window rate limiter."""

from datetime import timedelta

import pytest

from filehost.exceptions import RateLimitedError
from filehost.types import ClientRecord


@pytest.fixture
def existing_client(client_repo, clock):
    record = ClientRecord(
        identity="x",
        files=[],
        files_count=0,
        used_bytes=0,
        created_at=clock(),
        expires_at=clock() + timedelta(days=1),
        call_count=1,
        last_call_at=clock(),
    )
    client_repo.create(record)
    return record


def test_unknown_client_is_not_limited(rate_limiter, client_repo):
    for _ in range(20):
        assert rate_limiter.check("new-identity") is None
    assert client_repo.get("new-identity") is None


def test_sixth_call_in_window_is_rejected(rate_limiter, client_repo, existing_client, clock):
    # the first upload that created the record counts as call 1
    for _ in range(4):
        clock.advance(5)
        rate_limiter.check("x")

    assert client_repo.get("x").call_count == 5

    clock.advance(5)
    with pytest.raises(RateLimitedError):
        rate_limiter.check("x")

    assert client_repo.get("x").call_count == 5


def test_call_after_window_resets_counter_to_one(rate_limiter, client_repo, existing_client, clock):
    for _ in range(4):
        rate_limiter.check("x")
    with pytest.raises(RateLimitedError):
        rate_limiter.check("x")

    clock.advance(61)
    record = rate_limiter.check("x")

    assert record.call_count == 1
    assert client_repo.get("x").call_count == 1
    assert client_repo.get("x").last_call_at == clock()


def test_window_boundary_is_exclusive(rate_limiter, existing_client, clock):
    for _ in range(4):
        rate_limiter.check("x")

    # exactly 60 seconds is still inside the window
    clock.advance(60)
    with pytest.raises(RateLimitedError):
        rate_limiter.check("x")


def test_calls_counted_from_a_stale_read_cannot_exceed_limit(rate_limiter, client_repo, existing_client,
                                                             monkeypatch):
    for _ in range(3):
        rate_limiter.check("x")
    # two concurrent requests that both read the record at four calls
    snapshot = client_repo.get("x")
    assert snapshot.call_count == 4
    monkeypatch.setattr(client_repo, "get", lambda identity: snapshot)

    rate_limiter.check("x")
    with pytest.raises(RateLimitedError):
        rate_limiter.check("x")

    monkeypatch.undo()
    assert client_repo.get("x").call_count == 5
