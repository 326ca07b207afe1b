import json

import requests_mock

from jikan_client import cli
from jikan_client.config import Settings, load_settings


def test_load_settings_reads_environment(monkeypatch):
    monkeypatch.setenv("JIKAN_API_BASE", "http://localhost:8080/v4")
    monkeypatch.setenv("JIKAN_MIN_INTERVAL", "1.5")
    monkeypatch.setenv("JIKAN_MAX_RETRIES", "5")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = load_settings()

    assert settings.jikan_api_base == "http://localhost:8080/v4"
    assert settings.min_interval == 1.5
    assert settings.max_retries == 5
    assert settings.log_level == "DEBUG"


def test_genres_command_prints_json(capsys):
    with requests_mock.Mocker() as mocker:
        mocker.get("https://api.jikan.moe/v4/genres/anime", json={"data": [{"mal_id": 1, "name": "Action"}]})
        code = cli.main(["genres"], settings=Settings(min_interval=0))

    assert code == 0
    assert json.loads(capsys.readouterr().out) == {"data": [{"mal_id": 1, "name": "Action"}]}


def test_watch_search_best_match(capsys):
    with requests_mock.Mocker() as mocker:
        mocker.get(
            "http://hianime.local/api/v2/hianime/search",
            json={"status": 200, "data": {"animes": [{"id": "naruto-677", "name": "Naruto", "type": "TV"}]}},
        )
        code = cli.main(
            ["--hianime-url", "http://hianime.local", "watch-search", "Naruto", "--best"],
            settings=Settings(),
        )

    assert code == 0
    assert json.loads(capsys.readouterr().out)["id"] == "naruto-677"


def test_client_error_exits_nonzero(capsys):
    with requests_mock.Mocker() as mocker:
        mocker.get("http://jikan.local/v4/anime/1/full", status_code=404, text="missing")
        code = cli.main(["--jikan-url", "http://jikan.local/v4", "anime", "1"], settings=Settings(min_interval=0))

    assert code == 1
    assert "Client error 404: missing" in capsys.readouterr().err
