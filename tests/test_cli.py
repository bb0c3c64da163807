"""
Tests for spupload.cli.main module.

Tests the token -> site lookup -> upload pipeline including:
- Stage ordering and stop-on-first-failure
- Token and site id propagation
- Exit codes per failing stage
- Argument parsing and pre-flight checks
"""

from __future__ import annotations

import pytest
import requests
import requests_mock

from spupload.cli.main import create_argument_parser, main, run, run_preflight_checks
from spupload.core.config import CHUNK_SIZE

from .conftest import LOOKUP_URL, SESSION_URL, SITE_ID, TOKEN_URL, UPLOAD_URL


def _register_all(m, token_status=200, lookup_status=200, session_status=200):
    """Register every endpoint, returning the matchers keyed by stage."""
    return {
        "token": m.post(
            TOKEN_URL, status_code=token_status, json={"access_token": "T1"}
        ),
        "lookup": m.get(
            LOOKUP_URL,
            status_code=lookup_status,
            json={"id": SITE_ID} if lookup_status == 200 else {"error": "denied"},
        ),
        "session": m.post(
            SESSION_URL, status_code=session_status, json={"uploadUrl": UPLOAD_URL}
        ),
        "chunk": m.put(UPLOAD_URL, status_code=200, json={"id": "item-1"}),
    }


def test_run_success(settings, make_file) -> None:
    """Test a full run and the token propagated to the lookup."""
    path = make_file(100)
    with requests_mock.Mocker() as m:
        calls = _register_all(m)
        status = run(settings, file_path=str(path))

    assert status == 0
    assert calls["lookup"].last_request.headers["Authorization"] == "Bearer T1"
    assert calls["session"].last_request.headers["Authorization"] == "Bearer T1"
    assert calls["chunk"].call_count == 1


def test_stages_run_in_order(settings, make_file) -> None:
    """Test token, lookup, session and chunk requests happen in sequence."""
    path = make_file(100)
    with requests_mock.Mocker() as m:
        _register_all(m)
        run(settings, file_path=str(path))
        urls = [r.url.split("?")[0] for r in m.request_history]

    assert urls == [TOKEN_URL, LOOKUP_URL, SESSION_URL, UPLOAD_URL]


def test_token_failure_stops_before_lookup(settings, make_file, capsys) -> None:
    """Test that a token failure never contacts the lookup or upload endpoints."""
    path = make_file(100)
    with requests_mock.Mocker() as m:
        calls = _register_all(m, token_status=401)
        status = run(settings, file_path=str(path))

    assert status == 2
    assert not calls["lookup"].called
    assert not calls["session"].called
    assert not calls["chunk"].called
    out = capsys.readouterr().out
    assert "Error getting access token" in out
    assert "401 Unauthorized" in out


def test_lookup_failure_stops_before_upload(settings, make_file, capsys) -> None:
    """Test that a lookup failure never contacts the session or chunk endpoints."""
    path = make_file(100)
    with requests_mock.Mocker() as m:
        calls = _register_all(m, lookup_status=403)
        status = run(settings, file_path=str(path))

    assert status == 3
    assert not calls["session"].called
    assert not calls["chunk"].called
    out = capsys.readouterr().out
    assert "Error getting site ID" in out
    assert "denied" in out


def test_session_failure_exit_code(settings, make_file) -> None:
    """Test that a session failure sends no chunk and maps to its exit code."""
    path = make_file(100)
    with requests_mock.Mocker() as m:
        calls = _register_all(m, session_status=500)
        status = run(settings, file_path=str(path))

    assert status == 4
    assert not calls["chunk"].called


def test_chunk_failure_exit_code(settings, make_file) -> None:
    """Test that a rejected chunk maps to its exit code."""
    path = make_file(2 * CHUNK_SIZE)
    with requests_mock.Mocker() as m:
        calls = _register_all(m)
        calls["chunk"] = m.put(UPLOAD_URL, status_code=409)
        status = run(settings, file_path=str(path))

    assert status == 5
    assert calls["chunk"].call_count == 1


def test_empty_file_exit_code(settings, make_file) -> None:
    """Test that an empty file stops the run after lookup with its exit code."""
    path = make_file(0)
    with requests_mock.Mocker() as m:
        calls = _register_all(m)
        status = run(settings, file_path=str(path))

    assert status == 6
    assert calls["lookup"].called
    assert not calls["session"].called


def test_transport_failure_exit_code(settings, make_file, capsys) -> None:
    """Test that a network failure names its stage and maps to its exit code."""
    path = make_file(100)
    with requests_mock.Mocker() as m:
        calls = _register_all(m)
        m.get(LOOKUP_URL, exc=requests.exceptions.ConnectionError("dns failure"))
        status = run(settings, file_path=str(path))

    assert status == 7
    assert not calls["session"].called
    assert "Error getting site ID" in capsys.readouterr().out


def test_debug_prints_token(settings, make_file, capsys) -> None:
    """Test that --debug style runs echo the token."""
    path = make_file(100)
    with requests_mock.Mocker() as m:
        _register_all(m)
        run(settings, file_path=str(path), debug=True)

    assert "T1" in capsys.readouterr().out


def test_parser_defaults() -> None:
    """Test the default file path, chunk size and conflict behavior."""
    args = create_argument_parser().parse_args([])

    assert args.file_path == "file.txt"
    assert args.chunk_size == CHUNK_SIZE
    assert args.conflict_behavior == "replace"
    assert args.debug is False


def test_parser_rejects_unaligned_chunk_size() -> None:
    """Test that --chunk-size must be a multiple of 320 KiB."""
    with pytest.raises(SystemExit) as exc_info:
        create_argument_parser().parse_args(["-c", "1000"])

    assert exc_info.value.code == 1


def test_usage_error_exit_code_differs_from_auth_failure(settings, make_file) -> None:
    """Test that a bad CLI value and a token failure exit with different codes."""
    with pytest.raises(SystemExit) as exc_info:
        main(["--conflict-behavior", "bogus"])
    usage_status = exc_info.value.code

    path = make_file(100)
    with requests_mock.Mocker() as m:
        _register_all(m, token_status=401)
        auth_status = run(settings, file_path=str(path))

    assert usage_status == 1
    assert auth_status == 2
    assert usage_status != auth_status


def test_parser_accepts_aligned_chunk_size() -> None:
    """Test a valid --chunk-size."""
    args = create_argument_parser().parse_args(["-c", str(2 * CHUNK_SIZE)])
    assert args.chunk_size == 2 * CHUNK_SIZE


def test_preflight_missing_environment(make_file) -> None:
    """Test that pre-flight fails with the config exit code."""
    path = make_file(10)
    assert run_preflight_checks(str(path), environ={}) == 1


def test_preflight_missing_file(environ, tmp_path) -> None:
    """Test that pre-flight fails with the local file exit code."""
    assert run_preflight_checks(str(tmp_path / "nope.txt"), environ=environ) == 6


def test_preflight_pass(environ, make_file) -> None:
    """Test that pre-flight passes with a complete environment and a file."""
    path = make_file(10)
    assert run_preflight_checks(str(path), environ=environ) == 0


def test_main_success(environ, make_file, monkeypatch) -> None:
    """Test the console entry point end to end."""
    for name, value in environ.items():
        monkeypatch.setenv(name, value)
    path = make_file(100)

    with requests_mock.Mocker() as m:
        _register_all(m)
        with pytest.raises(SystemExit) as exc_info:
            main([str(path)])

    assert exc_info.value.code == 0


def test_main_missing_environment(environ, make_file, monkeypatch) -> None:
    """Test that main exits with the config code when variables are missing."""
    for name in environ:
        monkeypatch.delenv(name, raising=False)
    path = make_file(100)

    with pytest.raises(SystemExit) as exc_info:
        main([str(path), "--skip-preflight"])

    assert exc_info.value.code == 1
