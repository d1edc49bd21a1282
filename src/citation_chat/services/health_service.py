"""Health checks for the remote services."""

from __future__ import annotations

from dataclasses import dataclass

import requests


@dataclass
class HealthResult:
    ok: bool
    detail: dict

    def to_dict(self) -> dict:
        return {"ok": self.ok, **self.detail}


def ping_url(prediction_url: str) -> str:
    """Flowise exposes ``/api/v1/ping`` next to its prediction routes."""
    marker = "/api/v1/"
    if marker in prediction_url:
        base = prediction_url.split(marker, 1)[0]
        return f"{base.rstrip('/')}/api/v1/ping"
    return prediction_url


def _check_endpoint(url: str, session=None, timeout: int = 5) -> dict:
    client = session or requests
    probe = ping_url(url)
    try:
        resp = client.get(probe, timeout=timeout)
    except Exception as exc:
        return HealthResult(ok=False, detail={"url": probe, "error": str(exc)}).to_dict()
    if resp.status_code >= 500:
        return HealthResult(ok=False, detail={"url": probe, "status": resp.status_code, "text": getattr(resp, "text", "")}).to_dict()
    return HealthResult(ok=True, detail={"url": probe, "status": resp.status_code}).to_dict()


def check_answering(cfg, session=None) -> dict:
    if not cfg.answering.url:
        return HealthResult(ok=False, detail={"error": "answering.url is not configured"}).to_dict()
    return _check_endpoint(cfg.answering.url, session=session)


def check_suggestions(cfg, session=None) -> dict:
    if not cfg.suggestions.enabled:
        return HealthResult(ok=True, detail={"skipped": True}).to_dict()
    if not cfg.suggestions.url:
        return HealthResult(ok=False, detail={"error": "suggestions.url is not configured"}).to_dict()
    return _check_endpoint(cfg.suggestions.url, session=session)


def run_all_checks(cfg, *, session=None) -> dict:
    return {
        "answering": check_answering(cfg, session=session),
        "suggestions": check_suggestions(cfg, session=session),
    }


__all__ = ["HealthResult", "ping_url", "check_answering", "check_suggestions", "run_all_checks"]
