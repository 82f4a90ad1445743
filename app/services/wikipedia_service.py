"""Wikipedia lookups used to pre-fill the species form.

Two unauthenticated calls: an opensearch for the best matching title, then
the REST summary for that title.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote

import requests
from flask import current_app, has_app_context

logger = logging.getLogger(__name__)

DEFAULT_OPENSEARCH_URL = "https://en.wikipedia.org/w/api.php"
DEFAULT_SUMMARY_URL = "https://en.wikipedia.org/api/rest_v1/page/summary"
DEFAULT_USER_AGENT = "BiodiversityHub/1.0 (species catalogue)"


class WikipediaLookupError(Exception):
    """Wikipedia could not be reached or answered with something unreadable."""


@dataclass
class WikipediaSummary:
    title: str
    extract: str
    thumbnail_url: Optional[str] = None


def _setting(name: str, default):
    if has_app_context():
        return current_app.config.get(name, default)
    return default


def _get_json(url: str, params=None):
    """GET ``url``; None for non-OK responses, WikipediaLookupError for network failures."""
    headers = {
        'User-Agent': _setting('HTTP_USER_AGENT', DEFAULT_USER_AGENT),
        'Accept': 'application/json',
    }
    try:
        response = requests.get(url, params=params, headers=headers,
                                timeout=_setting('WIKIPEDIA_TIMEOUT', 10))
    except requests.exceptions.RequestException as e:
        logger.warning(f"[WIKIPEDIA] Request error for {url}: {e}")
        raise WikipediaLookupError(str(e)) from e

    if not response.ok:
        logger.info(f"[WIKIPEDIA] {url} answered {response.status_code}")
        return None
    try:
        return response.json()
    except ValueError as e:
        raise WikipediaLookupError(f"Invalid JSON from {url}") from e


def fetch_wikipedia_summary(search_query: str) -> Optional[WikipediaSummary]:
    """Return the summary of the best matching article, or None when nothing matches."""
    query = (search_query or "").strip()
    if not query:
        return None

    search_json = _get_json(
        _setting('WIKIPEDIA_OPENSEARCH_URL', DEFAULT_OPENSEARCH_URL),
        params={'action': 'opensearch', 'search': query, 'limit': 1, 'format': 'json'},
    )
    titles = search_json[1] if isinstance(search_json, list) and len(search_json) > 1 and isinstance(search_json[1], list) else []
    title = titles[0] if titles else None
    if not title or not isinstance(title, str):
        logger.info(f"[WIKIPEDIA] No article title for '{query}'")
        return None

    summary_base = _setting('WIKIPEDIA_SUMMARY_URL', DEFAULT_SUMMARY_URL).rstrip('/')
    summary = _get_json(f"{summary_base}/{quote(title.replace(' ', '_'), safe='')}")
    if not isinstance(summary, dict):
        return None

    extract = summary.get('extract')
    if not isinstance(extract, str) or not extract:
        logger.info(f"[WIKIPEDIA] Article '{title}' has no extract")
        return None

    thumbnail = summary.get('thumbnail') or {}
    thumbnail_url = None
    if isinstance(thumbnail, dict):
        thumbnail_url = thumbnail.get('source') or thumbnail.get('uri') or None

    return WikipediaSummary(title=title, extract=extract, thumbnail_url=thumbnail_url)
