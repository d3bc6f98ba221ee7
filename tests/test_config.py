from tourmanager_results.config import (
    BASE_URL,
    EVENT_CONFIG,
    EventConfig,
    Resource,
    load_base_url,
    load_event_config,
)


def test_default_event_config():
    assert EVENT_CONFIG == EventConfig("vuelta-a-espana", "2025")


def test_resource_paths_and_fields():
    assert [r.value for r in Resource] == [
        "stages",
        "ranking",
        "selections",
        "points",
        "startlist_favorites",
    ]
    assert [r.field for r in Resource] == [
        "stages",
        "rankings",
        "selections",
        "points",
        "favorites",
    ]


def test_load_event_config_from_env():
    env = {"TOURMANAGER_EVENT_ID": "tour-de-france", "TOURMANAGER_EVENT_YEAR": "2026"}
    assert load_event_config(env) == EventConfig("tour-de-france", "2026")


def test_load_event_config_falls_back_on_empty_values():
    assert load_event_config({"TOURMANAGER_EVENT_ID": ""}) == EVENT_CONFIG


def test_load_base_url(monkeypatch):
    monkeypatch.delenv("TOURMANAGER_BASE_URL", raising=False)
    assert load_base_url() == BASE_URL
    assert load_base_url({"TOURMANAGER_BASE_URL": "http://localhost:8000/"}) == (
        "http://localhost:8000"
    )
