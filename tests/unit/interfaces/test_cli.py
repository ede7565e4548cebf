from __future__ import annotations

import argparse
import functools
import json

import httpx
import pytest

from pushnotifications import cli
from pushnotifications.config.settings import FcmSettings
from pushnotifications.infrastructure.push.fcm import FcmLegacyClient


def test_parse_data_pairs():
    assert cli._parse_data(["a=1", "b=x=y"]) == {"a": "1", "b": "x=y"}
    assert cli._parse_data(None) is None
    with pytest.raises(argparse.ArgumentTypeError):
        cli._parse_data(["missing-separator"])


def test_parser_requires_api():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args([])


def test_legacy_send_prints_response(monkeypatch, capsys, make_transport):
    transport = make_transport(
        lambda request: httpx.Response(200, json={"multicast_id": 7, "results": [{"message_id": "0:1"}]})
    )
    monkeypatch.setattr(cli, "get_settings", lambda: FcmSettings(_env_file=None, server_key="AAAA:k"))
    monkeypatch.setattr(
        cli,
        "FcmLegacyClient",
        functools.partial(FcmLegacyClient, http_client=transport.client()),
    )

    code = cli.main(
        ["legacy", "--token", "device-1", "--title", "hi", "--body", "there", "--data", "k=v"]
    )

    assert code == 0
    printed = json.loads(capsys.readouterr().out)
    assert printed["results"][0]["registration_id"] == "device-1"
    assert json.loads(transport.requests[0].content)["data"] == {"k": "v"}


def test_legacy_failure_exit_code(monkeypatch, make_transport):
    transport = make_transport(
        lambda request: httpx.Response(200, json={"results": [{"error": "NotRegistered"}]})
    )
    monkeypatch.setattr(cli, "get_settings", lambda: FcmSettings(_env_file=None, server_key="AAAA:k"))
    monkeypatch.setattr(
        cli,
        "FcmLegacyClient",
        functools.partial(FcmLegacyClient, http_client=transport.client()),
    )

    assert cli.main(["legacy", "--token", "stale", "--title", "t", "--body", "b"]) == 1


def test_missing_configuration_exit_code(monkeypatch):
    monkeypatch.setattr(cli, "get_settings", lambda: FcmSettings(_env_file=None))

    assert cli.main(["v1", "--token", "device", "--title", "t", "--body", "b"]) == 2
    assert cli.main(["legacy", "--token", "device", "--title", "t", "--body", "b"]) == 2
