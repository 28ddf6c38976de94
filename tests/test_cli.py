"""Tests for the rhythmwatch command-line client."""

from __future__ import annotations

import json

import httpx
import pytest

from rhythmwatch.cli import build_parser, main


def _transport(seen: list, mode: str = "working", time: str = "00:00:00"):
    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        seen.append((request.method, request.url.path, body))
        return httpx.Response(200, json={"mode": mode, "formatted_time": time})

    return httpx.MockTransport(handler)


class TestCommands:
    def test_work(self, capsys):
        seen = []
        assert main(["work"], transport=_transport(seen)) == 0
        assert seen == [("POST", "/session/work", None)]
        assert "working" in capsys.readouterr().out

    def test_break_with_time(self, capsys):
        seen = []
        code = main(["break", "00:25:00"], transport=_transport(seen, "on_break", "00:25:00"))
        assert code == 0
        assert seen == [("POST", "/session/break", {"time": "00:25:00"})]
        assert "00:25:00" in capsys.readouterr().out

    def test_break_without_time_sends_null(self):
        seen = []
        main(["break"], transport=_transport(seen, "idle"))
        assert seen == [("POST", "/session/break", {"time": None})]

    def test_reset(self):
        seen = []
        main(["reset"], transport=_transport(seen, "idle"))
        assert seen[0][:2] == ("POST", "/session/reset")

    def test_status(self):
        seen = []
        main(["status"], transport=_transport(seen))
        assert seen[0][:2] == ("GET", "/session")


class TestErrors:
    def test_unreachable_service_exits_1(self, capsys):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        assert main(["status"], transport=httpx.MockTransport(refuse)) == 1
        assert "connection refused" in capsys.readouterr().err

    def test_server_error_exits_1(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(500))
        assert main(["status"], transport=transport) == 1

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])
