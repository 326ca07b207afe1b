import pytest
import requests
import requests_mock

from jikan_client.hianime import HianimeClient, HianimeError, extract_ep_id, find_best_match

BASE = "https://anivault-hianime-api.vercel.app/api/v2/hianime"


def test_search_returns_data_envelope():
    with requests_mock.Mocker() as mocker:
        mocker.get(
            f"{BASE}/search",
            json={"status": 200, "data": {"animes": [{"id": "steinsgate-3"}], "totalPages": 1}},
        )
        data = HianimeClient().search("steins gate", page=2)
        assert data["animes"] == [{"id": "steinsgate-3"}]
        assert mocker.last_request.qs == {"q": ["steins gate"], "page": ["2"]}


def test_episodes_path_is_encoded():
    with requests_mock.Mocker() as mocker:
        mocker.get(requests_mock.ANY, json={"status": 200, "data": {"totalEpisodes": 0, "episodes": []}})
        HianimeClient(base_url="http://localhost:4000/").get_episodes("a/b c")
        assert mocker.last_request.url == "http://localhost:4000/api/v2/hianime/anime/a%2Fb%20c/episodes"


def test_anime_info():
    with requests_mock.Mocker() as mocker:
        mocker.get(f"{BASE}/anime/steinsgate-3", json={"status": 200, "data": {"anime": {"info": {}}}})
        assert HianimeClient().get_anime_info("steinsgate-3") == {"anime": {"info": {}}}


def test_http_failure_raises():
    with requests_mock.Mocker() as mocker:
        mocker.get(f"{BASE}/anime/missing/episodes", status_code=404)
        with pytest.raises(HianimeError, match=r"episodes failed \(404\)"):
            HianimeClient().get_episodes("missing")
        assert mocker.call_count == 1


def test_unsuccessful_envelope_raises():
    with requests_mock.Mocker() as mocker:
        mocker.get(f"{BASE}/search", json={"status": 500, "message": "scraper broke"})
        with pytest.raises(HianimeError, match="unsuccessful response"):
            HianimeClient().search("naruto")


def test_connection_error_raises():
    with requests_mock.Mocker() as mocker:
        mocker.get(f"{BASE}/search", exc=requests.exceptions.ConnectionError)
        with pytest.raises(HianimeError):
            HianimeClient().search("naruto")


def test_extract_ep_id():
    assert extract_ep_id("steinsgate-3?ep=213") == "213"
    assert extract_ep_id("one-piece-100?lang=en&ep=2142") == "2142"
    assert extract_ep_id("steinsgate-3") is None
    assert extract_ep_id(None) is None


ANIMES = [
    {"id": "steinsgate-movie", "name": "Steins;Gate: The Movie", "type": "Movie"},
    {"id": "steinsgate-0", "name": "Steins;Gate 0", "jname": "Steins;Gate Zero", "type": "TV"},
    {"id": "steinsgate-3", "name": "Steins;Gate", "jname": "Steins;Gate", "type": "TV"},
]


def test_best_match_prefers_exact_normalized_name():
    assert find_best_match("STEINS GATE", ANIMES)["id"] == "steinsgate-3"


def test_best_match_uses_jname():
    assert find_best_match("Steins;Gate Zero", ANIMES)["id"] == "steinsgate-0"


def test_best_match_falls_back_to_inclusion():
    assert find_best_match("Steins;Gate: The Movie - Load Region of Deja Vu", ANIMES)["id"] == "steinsgate-movie"


def test_best_match_falls_back_to_tv_then_first():
    animes = [
        {"id": "x-special", "name": "Unrelated Special", "type": "Special"},
        {"id": "x-tv", "name": "Another Show", "type": "TV"},
    ]
    assert find_best_match("nothing alike", animes)["id"] == "x-tv"
    assert find_best_match("nothing alike", animes[:1])["id"] == "x-special"
    assert find_best_match("anything", []) is None
