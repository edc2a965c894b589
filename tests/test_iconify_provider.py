"""Tests for IconifyProvider with a stub HTTP session (no network)."""

import logging
from pathlib import Path
from typing import Any

import pytest
import requests

from colmena import Icon
from colmena.cache import FileCache
from colmena.errors import ProviderError
from colmena.providers import DEFAULT_API_HOSTS, IconifyProvider

_INVALID_JSON = object()

TABLER = {
    "prefix": "tabler",
    "width": 24,
    "height": 24,
    "icons": {
        "home": {"body": '<path d="M5 12H3l9-9"/>'},
        "star": {"body": "<path/>", "rotate": 2},
        "wide": {"body": "<rect/>", "width": 48},
        "broken": {"width": 24},
    },
}


class StubResponse:
    def __init__(self, status_code: int = 200, payload: Any = None) -> None:
        self.status_code = status_code
        self._payload = payload

    def json(self) -> Any:
        if self._payload is _INVALID_JSON:
            raise ValueError("Expecting value")
        return self._payload


class StubSession:
    """Records requests and answers per host.

    ``answers`` maps a host to a StubResponse or an exception to raise.
    Hosts without an answer raise ConnectionError.
    """

    def __init__(self, answers: dict[str, Any] | None = None) -> None:
        self.answers = answers or {}
        self.calls: list[dict[str, Any]] = []

    def get(self, url: str, params: dict[str, str] | None = None, **kwargs: Any) -> StubResponse:
        self.calls.append({"url": url, "params": params, **kwargs})
        for host, answer in self.answers.items():
            if url.startswith(host):
                if isinstance(answer, Exception):
                    raise answer
                return answer
        raise requests.exceptions.ConnectionError(f"no route to {url}")


def tabler_payload(*names: str) -> dict[str, Any]:
    """Subset of TABLER, as the API returns for ?icons=..."""
    return {**TABLER, "icons": {n: TABLER["icons"][n] for n in names if n in TABLER["icons"]}}


def primary(payload: Any, status: int = 200) -> dict[str, StubResponse]:
    return {DEFAULT_API_HOSTS[0]: StubResponse(status, payload)}


class TestGet:
    def test_fetches_from_first_host(self) -> None:
        session = StubSession(primary(tabler_payload("home")))
        icon = IconifyProvider("tabler", session=session).get("home")

        assert icon is not None
        assert icon.content == '<path d="M5 12H3l9-9"/>'
        assert icon.get_attribute("viewBox") == "0 0 24 24"

        [call] = session.calls
        assert call["url"] == "https://api.iconify.design/tabler.json"
        assert call["params"] == {"icons": "home"}
        assert call["timeout"] == 10
        assert "User-Agent" in call["headers"]

    def test_applies_transforms(self) -> None:
        session = StubSession(primary(tabler_payload("star")))
        icon = IconifyProvider("tabler", session=session).get("star")
        assert icon is not None
        assert icon.content == '<g transform="translate(24, 24) rotate(180)"><path/></g>'

    def test_icon_dimensions_override_set(self) -> None:
        session = StubSession(primary(tabler_payload("wide")))
        icon = IconifyProvider("tabler", session=session).get("wide")
        assert icon is not None
        assert icon.get_attribute("viewBox") == "0 0 48 24"

    def test_unknown_icon(self) -> None:
        session = StubSession(primary({"prefix": "tabler", "icons": {}, "not_found": ["nope"]}))
        assert IconifyProvider("tabler", session=session).get("nope") is None

    def test_invalid_json_is_not_found(self) -> None:
        session = StubSession(primary(_INVALID_JSON))
        assert IconifyProvider("tabler", session=session).get("home") is None

    def test_payload_without_icons_is_not_found(self) -> None:
        session = StubSession(primary({"error": "bad prefix"}))
        assert IconifyProvider("tabler", session=session).get("home") is None

    def test_invalid_record_raises(self) -> None:
        session = StubSession(primary(tabler_payload("broken")))
        with pytest.raises(ProviderError, match="tabler:broken"):
            IconifyProvider("tabler", session=session).get("broken")

    def test_custom_timeout(self) -> None:
        session = StubSession(primary(tabler_payload("home")))
        IconifyProvider("tabler", session=session, timeout=2.5).get("home")
        assert session.calls[0]["timeout"] == 2.5


class TestHostFallback:
    def test_falls_through_errors_and_bad_status(self) -> None:
        first, second, third = DEFAULT_API_HOSTS
        session = StubSession(
            {
                first: requests.exceptions.Timeout("slow"),
                second: StubResponse(503),
                third: StubResponse(200, tabler_payload("home")),
            }
        )
        icon = IconifyProvider("tabler", session=session).get("home")

        assert icon is not None
        assert [c["url"] for c in session.calls] == [f"{h}/tabler.json" for h in DEFAULT_API_HOSTS]

    def test_first_success_stops(self) -> None:
        session = StubSession(primary(tabler_payload("home")))
        IconifyProvider("tabler", session=session).get("home")
        assert len(session.calls) == 1

    def test_all_hosts_failing_is_not_found(self, caplog: pytest.LogCaptureFixture) -> None:
        session = StubSession()
        with caplog.at_level(logging.WARNING, logger="colmena"):
            assert IconifyProvider("tabler", session=session).get("home") is None
        assert len(session.calls) == len(DEFAULT_API_HOSTS)
        assert "All Iconify hosts failed" in caplog.text

    def test_custom_hosts(self) -> None:
        session = StubSession({"https://icons.internal": StubResponse(200, tabler_payload("home"))})
        provider = IconifyProvider(
            "tabler", session=session, api_hosts=["https://icons.internal/"]
        )
        assert provider.api_hosts == ("https://icons.internal",)
        assert provider.get("home") is not None
        assert session.calls[0]["url"] == "https://icons.internal/tabler.json"


class TestCaching:
    def test_cached_icon_needs_no_network(self, tmp_path: Path) -> None:
        cache = FileCache(tmp_path)
        warm = StubSession(primary(tabler_payload("home")))
        icon = IconifyProvider("tabler", cache=cache, session=warm).get("home")

        offline = StubSession()
        provider = IconifyProvider("tabler", cache=cache, session=offline)
        assert provider.get("home") == icon
        assert provider.has("home")
        assert offline.calls == []

    def test_has_fetches_on_cold_cache(self) -> None:
        session = StubSession(primary(tabler_payload()))
        assert not IconifyProvider("tabler", session=session).has("nope")
        assert len(session.calls) == 1

    def test_misses_are_not_cached(self, tmp_path: Path) -> None:
        cache = FileCache(tmp_path)
        IconifyProvider("tabler", cache=cache, session=StubSession()).get("home")
        assert cache.stats().files == 0


class TestFetchMany:
    def test_one_request_for_misses(self, tmp_path: Path) -> None:
        cache = FileCache(tmp_path)
        IconifyProvider(
            "tabler", cache=cache, session=StubSession(primary(tabler_payload("home")))
        ).get("home")

        session = StubSession(primary(tabler_payload("star", "wide", "broken")))
        provider = IconifyProvider("tabler", cache=cache, session=session)
        icons = provider.fetch_many(["home", "star", "wide", "broken", "nope", "star"])

        assert set(icons) == {"home", "star", "wide"}
        assert all(isinstance(icon, Icon) for icon in icons.values())
        [call] = session.calls
        assert call["params"] == {"icons": "star,wide,broken,nope"}
        assert provider.has("wide")

    def test_all_cached(self, tmp_path: Path) -> None:
        cache = FileCache(tmp_path)
        IconifyProvider(
            "tabler", cache=cache, session=StubSession(primary(tabler_payload("home")))
        ).get("home")
        session = StubSession()
        icons = IconifyProvider("tabler", cache=cache, session=session).fetch_many(["home"])
        assert list(icons) == ["home"]
        assert session.calls == []

    def test_network_failure_returns_cached_only(self) -> None:
        assert IconifyProvider("tabler", session=StubSession()).fetch_many(["a", "b"]) == {}


def test_all_is_empty() -> None:
    assert IconifyProvider("tabler", session=StubSession()).all() == []


def test_prefix() -> None:
    assert IconifyProvider("mdi", session=StubSession()).prefix == "mdi"


class ClosingSession(StubSession):
    """StubSession usable as a context manager, recording every instance."""

    instances: list["ClosingSession"] = []

    def __init__(self) -> None:
        super().__init__(primary(tabler_payload("home")))
        self.closed = False
        ClosingSession.instances.append(self)

    def __enter__(self) -> "ClosingSession":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.closed = True


class TestSessionLifecycle:
    @pytest.fixture(autouse=True)
    def owned_sessions(self, monkeypatch: pytest.MonkeyPatch) -> list[ClosingSession]:
        ClosingSession.instances = []
        monkeypatch.setattr("colmena.providers.iconify.requests.Session", ClosingSession)
        return ClosingSession.instances

    def test_no_session_opened_at_construction(self, owned_sessions: list[ClosingSession]) -> None:
        IconifyProvider("tabler")
        assert owned_sessions == []

    def test_own_session_closed_after_each_lookup(
        self, owned_sessions: list[ClosingSession]
    ) -> None:
        provider = IconifyProvider("tabler")

        assert provider.get("home") is not None
        assert provider.fetch_many(["home"]) == {"home": provider.get("home")}

        assert len(owned_sessions) == 3
        assert all(session.closed for session in owned_sessions)
        assert all(len(session.calls) == 1 for session in owned_sessions)

    def test_injected_session_left_open(self, owned_sessions: list[ClosingSession]) -> None:
        session = StubSession(primary(tabler_payload("home")))
        IconifyProvider("tabler", session=session).get("home")
        assert owned_sessions == []
        assert len(session.calls) == 1
