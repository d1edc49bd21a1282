from types import SimpleNamespace

from citation_chat.services import health_service as hs


def _cfg(url="http://flowise.local/api/v1/prediction/abc", suggestions_enabled=False, suggestions_url=""):
    return SimpleNamespace(
        answering=SimpleNamespace(url=url),
        suggestions=SimpleNamespace(enabled=suggestions_enabled, url=suggestions_url),
    )


def test_ping_url():
    assert hs.ping_url("http://host:3000/api/v1/prediction/abc") == "http://host:3000/api/v1/ping"
    assert hs.ping_url("http://other/answer") == "http://other/answer"


def test_check_answering_ok():
    class DummySession:
        @staticmethod
        def get(url, timeout=5):
            assert url.endswith("/api/v1/ping")
            return SimpleNamespace(status_code=200, text="pong")

    res = hs.check_answering(_cfg(), session=DummySession)
    assert res["ok"] is True
    assert res["status"] == 200


def test_check_answering_unreachable():
    class DummySession:
        @staticmethod
        def get(url, timeout=5):
            raise ConnectionError("refused")

    res = hs.check_answering(_cfg(), session=DummySession)
    assert res["ok"] is False
    assert "refused" in res["error"]


def test_check_answering_not_configured():
    assert hs.check_answering(_cfg(url=""))["ok"] is False


def test_suggestions_skipped_when_disabled():
    res = hs.check_suggestions(_cfg())
    assert res == {"ok": True, "skipped": True}


def test_run_all_checks_server_error():
    class DummySession:
        @staticmethod
        def get(url, timeout=5):
            return SimpleNamespace(status_code=503, text="down")

    res = hs.run_all_checks(_cfg(suggestions_enabled=True, suggestions_url="http://s/api/v1/prediction/x"), session=DummySession)
    assert res["answering"]["ok"] is False
    assert res["suggestions"]["ok"] is False
