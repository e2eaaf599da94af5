"""Open-knowledge search oracle.

The classifier only needs `search(query, limit) -> list[SearchHit]`; any
object with that method can stand in for the Wikipedia client (tests use
in-memory fakes). A query that cannot be completed raises OracleError,
which the classifier treats as "no hits" for that one query. Any other
exception aborts the attempt and is retried.
"""

import html
import re
from typing import List, NamedTuple, Optional

import requests
from requests import Session

DEFAULT_API_URL = 'https://he.wikipedia.org/w/api.php'
DEFAULT_USER_AGENT = 'namegame-server/1.0 (classroom celebrity game)'

_MARKUP_RE = re.compile(r'<[^>]*>')


class OracleError(RuntimeError):
    """A single oracle query could not be completed or parsed."""


class SearchHit(NamedTuple):
    title: str
    snippet: str


def strip_markup(text: Optional[str]) -> str:
    if not text:
        return ''
    return html.unescape(_MARKUP_RE.sub('', text))


class WikipediaOracle:
    """MediaWiki full-text search (`list=search`)."""

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        *,
        timeout: float = 10.0,
        user_agent: str = DEFAULT_USER_AGENT,
        session: Optional[Session] = None,
    ):
        self.api_url = api_url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({'User-Agent': user_agent})

    def search(self, query: str, limit: int = 5) -> List[SearchHit]:
        params = {
            'action': 'query',
            'list': 'search',
            'srsearch': query,
            'format': 'json',
            'srlimit': limit,
        }
        try:
            response = self.session.get(self.api_url, params=params, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as exc:
            raise OracleError(f"request failed: {exc}") from exc
        except ValueError as exc:
            raise OracleError(f"undecodable response: {exc}") from exc

        if not isinstance(payload, dict):
            raise OracleError(f"unexpected payload type {type(payload).__name__}")
        results = (payload.get('query') or {}).get('search') or []
        hits = []
        for item in results:
            if not isinstance(item, dict) or not item.get('title'):
                continue
            hits.append(SearchHit(title=str(item['title']), snippet=strip_markup(item.get('snippet'))))
        return hits
