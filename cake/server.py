from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone as dt_timezone
from typing import Callable, Mapping, Optional, Tuple
from zoneinfo import ZoneInfo

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from . import __version__
from .parser import ScheduleParser
from .render import select_current


class DocumentSource:
    """Holds the most recently fetched page text."""

    def __init__(self, fetch: Callable[[], str], text: Optional[str] = None) -> None:
        self._fetch = fetch
        self._text = text
        self._lock = threading.Lock()
        self.fetched_at: Optional[datetime] = None
        if text is not None:
            self.fetched_at = datetime.now(dt_timezone.utc)

    def refresh(self) -> str:
        text = self._fetch()
        with self._lock:
            self._text = text
            self.fetched_at = datetime.now(dt_timezone.utc)
        return text

    def get(self) -> str:
        with self._lock:
            text = self._text
        if text is None:
            return self.refresh()
        return text


def parse_listen(address: str) -> Tuple[str, int]:
    host, sep, port = address.rpartition(":")
    if not sep:
        host, port = "", address
    try:
        port_number = int(port)
    except ValueError as exc:
        raise ValueError(f"invalid listen address {address!r}") from exc
    return host or "0.0.0.0", port_number


def create_app(
    source: DocumentSource,
    timezone: ZoneInfo,
    months: Optional[Mapping[str, int]] = None,
    current_only: bool = False,
    clock: Callable[[ZoneInfo], datetime] = datetime.now,
) -> FastAPI:
    app = FastAPI(title="cake", version=__version__)
    parser = ScheduleParser(months=months)

    def roster():
        return parser.parse(source.get(), clock(timezone))

    @app.get("/")
    def schedule(current: Optional[bool] = None):
        persons = roster()
        if (current_only if current is None else current):
            person = select_current(persons)
            return JSONResponse(person.to_dict() if person else None)
        return JSONResponse([person.to_dict() for person in persons])

    @app.get("/health")
    def health():
        return {
            "status": "ok",
            "service": "cake",
            "version": __version__,
            "timestamp": datetime.now(dt_timezone.utc).isoformat(),
            "fetched_at": source.fetched_at.isoformat() if source.fetched_at else None,
            "persons_count": len(roster()),
        }

    logging.info("Schedule server ready")
    return app
