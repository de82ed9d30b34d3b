from __future__ import annotations

import logging

import requests
from requests.auth import HTTPBasicAuth


class FetchError(Exception):
    pass


def fetch_page(url: str, login: str, password: str, timeout: float = 30) -> str:
    """Return the storage-format body of a wiki page from its REST endpoint."""
    logging.info("Fetching page %s", url)
    try:
        resp = requests.get(
            url,
            params={"expand": "body.storage"},
            auth=HTTPBasicAuth(login, password),
            headers={"Accept": "application/json"},
            timeout=timeout,
        )
    except requests.RequestException as exc:
        raise FetchError(f"can't fetch {url}: {exc}") from exc

    if resp.status_code >= 400:
        raise FetchError(f"can't fetch {url} ({resp.status_code}): {resp.text[:500]}")

    try:
        payload = resp.json()
    except ValueError as exc:
        raise FetchError(f"page {url} is not JSON: {exc}") from exc

    try:
        body = payload["body"]["storage"]["value"]
    except (KeyError, TypeError) as exc:
        raise FetchError(f"page {url} has no body.storage.value") from exc
    if not isinstance(body, str):
        raise FetchError(f"page {url} body.storage.value is not text")

    logging.info("Fetched %d characters from %s", len(body), url)
    return body
