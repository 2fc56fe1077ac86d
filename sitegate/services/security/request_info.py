"""Snapshot of the request attributes the gate inspects."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Optional
from urllib.parse import unquote_plus

from flask import Request


@dataclass(frozen=True)
class RequestInfo:
    ip: str
    method: str
    url: str
    user_agent: str = ""
    host: Optional[str] = None
    referer: Optional[str] = None
    text: str = ""

    @classmethod
    def from_flask(cls, req: Request) -> "RequestInfo":
        return cls(
            ip=req.remote_addr or "unknown",
            method=req.method,
            url=req.full_path.rstrip("?"),
            user_agent=req.headers.get("User-Agent", ""),
            host=req.headers.get("Host"),
            referer=req.headers.get("Referer"),
            text=inspectable_text(req),
        )


def inspectable_text(req: Request) -> str:
    """Path, decoded query and body text concatenated for pattern scanning.

    JSON bodies are scanned twice: as received and re-serialised from the
    parsed document, so string escapes such as ``\\u003a`` are decoded.
    """
    parts = [req.path]
    query = req.query_string.decode("utf-8", "replace")
    if query:
        parts.append(unquote_plus(query))
    if req.mimetype == "multipart/form-data":
        # os ficheiros em si não são inspeccionados, só os campos de texto
        parts.extend(f"{key}={value}" for key, value in req.form.items(multi=True))
    else:
        body = req.get_data(cache=True, as_text=True)
        if body:
            parts.append(unquote_plus(body) if req.mimetype == "application/x-www-form-urlencoded" else body)
        if body and req.is_json:
            document = req.get_json(silent=True)
            if document is not None:
                parts.append(json.dumps(document, ensure_ascii=False))
    return " ".join(parts)
