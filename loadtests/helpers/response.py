"""Response error extraction for load test observability.

Parses AutoTradeHub API error responses into human-readable messages.
Handles two response shapes:

- Pydantic validation (422): {"detail": [{"loc": [...], "msg": "...", "type": "..."}]}
- Domain errors (400/402/404/409/503): {"kind": "...", "errors": {...}, "context": {...}}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """Extract a compact error message suitable for Locust failure messages."""
    try:
        body = response.json()
    except Exception:
        # Not JSON, return raw text, truncated
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if "detail" in body and isinstance(body["detail"], list):
        parts = []
        for err in body["detail"]:
            loc = ".".join(str(p) for p in err.get("loc", []))
            msg = err.get("msg", str(err))
            parts.append(f"{loc}: {msg}" if loc else msg)
        return " | ".join(parts)

    if "kind" in body:
        errors = body.get("errors")
        if isinstance(errors, dict):
            detail = " | ".join(f"{k}: {', '.join(map(str, v)) if isinstance(v, list) else v}" for k, v in errors.items())
        else:
            detail = str(errors)
        return f"{body['kind']}: {detail}"

    # Protean's default handler: {"error": ...}
    if "error" in body:
        return str(body["error"])

    return str(body)[:300]
