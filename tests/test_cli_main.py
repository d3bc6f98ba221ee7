import json

import pytest

import tourmanager_results.cli as cli
import tourmanager_results.fetcher as ft


class R:
    ok = True
    status_code = 200

    def __init__(self, payload):
        self._payload = payload

    def json(self):
        return self._payload


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    # no .env file in cwd, no overrides from the shell
    monkeypatch.chdir(tmp_path)
    for key in ("TOURMANAGER_EVENT_ID", "TOURMANAGER_EVENT_YEAR", "TOURMANAGER_BASE_URL"):
        monkeypatch.delenv(key, raising=False)


def fake_service(monkeypatch, fail=()):
    calls = []

    def fake_get(url, timeout=15):
        calls.append(url)
        path = url.split("/")[-3]
        if path in fail:
            raise ft.requests.ConnectionError("network down")
        return R([{"rnk": 1, "ridername": "VINGEGAARD Jonas", "pnt": 120}])

    monkeypatch.setattr(ft.requests, "get", fake_get)
    return calls


def test_cli_fetches_all_resources_by_default(monkeypatch, clean_env):
    calls = fake_service(monkeypatch)
    rc = cli.main([])
    assert rc == 0
    assert len(calls) == 5


def test_cli_selected_resources_and_overrides(monkeypatch, clean_env):
    calls = fake_service(monkeypatch)
    rc = cli.main(
        [
            "rankings",
            "favorites",
            "--event-id",
            "tour-de-france",
            "--event-year",
            "2026",
            "--base-url",
            "http://localhost:8000",
        ]
    )
    assert rc == 0
    assert sorted(calls) == [
        "http://localhost:8000/ranking/tour-de-france/2026",
        "http://localhost:8000/startlist_favorites/tour-de-france/2026",
    ]


def test_cli_reads_env(monkeypatch, clean_env):
    monkeypatch.setenv("TOURMANAGER_EVENT_ID", "giro-d-italia")
    calls = fake_service(monkeypatch)
    assert cli.main(["stages", "--json"]) == 0
    assert calls == [
        "https://tourmanager-scraper.onrender.com/stages/giro-d-italia/2025"
    ]


def test_cli_returns_2_on_fetch_error(monkeypatch, clean_env):
    fake_service(monkeypatch, fail=("points",))
    assert cli.main(["points", "rankings"]) == 2


def test_cli_unknown_resource(monkeypatch, clean_env):
    calls = fake_service(monkeypatch)
    assert cli.main(["teams"]) == 2
    assert calls == []


def test_cli_prints_bracketed_text_literally(monkeypatch, clean_env, capsys):
    monkeypatch.setattr(
        ft.requests, "get", lambda url, timeout=None: R([{"route": "Madrid [/b]"}])
    )
    assert cli.main(["stages"]) == 0
    out = capsys.readouterr().out
    assert "route=Madrid [/b]" in out


def test_cli_json_output_is_parseable(monkeypatch, clean_env, capsys):
    fake_service(monkeypatch, fail=("points",))
    assert cli.main(["rankings", "points", "--json"]) == 2
    captured = capsys.readouterr()
    data = json.loads(captured.out)
    assert data["rankings"] == [
        {"rnk": 1, "ridername": "VINGEGAARD Jonas", "pnt": 120}
    ]
    assert data["points"] == []
    assert "Failed to load points" in captured.err


def test_cli_strict_flag(monkeypatch, clean_env):
    monkeypatch.setattr(
        ft.requests, "get", lambda url, timeout=None: R({"detail": "Not Found"})
    )
    assert cli.main(["points"]) == 0
    assert cli.main(["points", "--strict"]) == 2
