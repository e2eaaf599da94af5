import logging
import re
import time
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .constraints import ConstraintViolation, ParsedName, validate
from .oracle import OracleError, SearchHit, WikipediaOracle
from .results import REASON_NOT_FOUND, REASON_VERIFICATION_ERROR, VerificationResult
from .variants import generate_variants

logger = logging.getLogger(__name__)

QUERY_LIMIT = 5
FALLBACK_LIMIT = 10


@dataclass(frozen=True)
class AcceptancePolicy:
    """Signals that turn an oracle hit into a verdict.

    The indicator lists are heuristics (biographical phrasing, occupations,
    honorifics) with no measured precision; swap in another policy rather
    than editing the classifier.
    """
    person_indicators: Tuple[str, ...] = (
        '(נולד', '(נפטר', '(נ.', '(נולדה', '(נפטרה',
        'הייתה', 'היה', 'היתה',
        'זמר', 'זמרת', 'שחקן', 'שחקנית', 'רב', 'רבנית',
        'פוליטיקאי', 'ספורטאי', 'כדורגלן', 'סופר', 'סופרת',
        'שר', 'שרה', 'ראש ממשלה', 'נשיא', 'נשיאה',
        'פרופסור', 'ד"ר', 'מנכ"ל', 'יזם', 'יזמית',
        'CEO', 'founder', 'מייסד', 'בעל', 'ח״כ',
    )
    fallback_indicators: Tuple[str, ...] = (
        'נולד', 'נפטר', 'הייתה', 'היה', 'זמר', 'שחקן', 'רב', 'פוליטיקאי',
        'ספורטאי', 'סופר', 'שר', 'נשיא', 'פרופסור', 'יזם', 'CEO',
    )
    # ASCII word boundaries so a year glued to a Hebrew prefix ("ב-1985", "ב1985") still counts
    year_pattern: re.Pattern = re.compile(r'\b(?:19|20)\d{2}\b', re.ASCII)
    description_length: int = 200
    review_excerpt_length: int = 150

    def has_person_indicator(self, hit: SearchHit) -> bool:
        return _contains_any(self.person_indicators, hit)

    def has_fallback_indicator(self, hit: SearchHit) -> bool:
        return _contains_any(self.fallback_indicators, hit)

    def has_year(self, hit: SearchHit) -> bool:
        return self.year_pattern.search(hit.snippet) is not None


def _contains_any(indicators: Iterable[str], hit: SearchHit) -> bool:
    return any(ind in hit.snippet or ind in hit.title for ind in indicators)


def build_queries(name: str, variants: Sequence[str]) -> List[str]:
    queries = []
    for variant in variants:
        queries.append(variant)
        queries.append(f'"{variant}"')
    queries.append(name)
    queries.append(f'"{name}"')
    return queries


class MatchClassifier:
    """Decide whether a submitted name denotes a real public figure.

    Queries run strictly in order (each variant bare and quoted, then the
    original name) and the first acceptable hit wins, so the reported match
    depends on query order. A paced, sequential walk keeps us under the
    oracle's rate limits.
    """

    def __init__(
        self,
        oracle,
        policy: Optional[AcceptancePolicy] = None,
        *,
        query_delay: float = 0.15,
        name_delay: float = 0.6,
        retry_backoff: float = 2.0,
        max_retries: int = 3,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.oracle = oracle
        self.policy = policy or AcceptancePolicy()
        self.query_delay = query_delay
        self.name_delay = name_delay
        self.retry_backoff = retry_backoff
        self.max_retries = max_retries
        self._sleep = sleep

    @classmethod
    def from_config(cls, config) -> 'MatchClassifier':
        oracle = WikipediaOracle(
            config.get('ORACLE_API_URL') or 'https://he.wikipedia.org/w/api.php',
            timeout=float(config.get('ORACLE_TIMEOUT_SEC', 10)),
            user_agent=config.get('ORACLE_USER_AGENT') or 'namegame-server/1.0',
        )
        return cls(
            oracle,
            query_delay=float(config.get('QUERY_DELAY_SEC', 0.15)),
            name_delay=float(config.get('NAME_DELAY_SEC', 0.6)),
            retry_backoff=float(config.get('RETRY_BACKOFF_SEC', 2.0)),
            max_retries=int(config.get('VERIFY_MAX_RETRIES', 3)),
        )

    def classify(self, name: str, letter_pair: str, max_retries: Optional[int] = None) -> VerificationResult:
        retries_left = self.max_retries if max_retries is None else max_retries
        while True:
            try:
                return self._classify_once(name, letter_pair)
            except Exception as exc:
                if retries_left <= 0:
                    logger.error(f"[verify-error] name={name!r} pair={letter_pair} giving up: {exc}")
                    return VerificationResult.invalid(REASON_VERIFICATION_ERROR)
                retries_left -= 1
                logger.warning(f"[verify-retry] name={name!r} retries_left={retries_left}: {exc}")
                self._sleep(self.retry_backoff)

    def classify_batch(self, names: Iterable[str], letter_pair: str) -> Dict[str, VerificationResult]:
        """Classify unique names for one pair, pausing after each oracle-backed lookup."""
        results: Dict[str, VerificationResult] = {}
        for name in names:
            if not name or not name.strip():
                continue
            try:
                validate(name, letter_pair)
            except ConstraintViolation as exc:
                results[name] = VerificationResult.invalid(exc.reason)
                continue
            logger.info(f"[verify] name={name!r} pair={letter_pair}")
            results[name] = self.classify(name.strip(), letter_pair)
            self._sleep(self.name_delay)
        return results

    def _classify_once(self, name: str, letter_pair: str) -> VerificationResult:
        try:
            parsed = validate(name, letter_pair)
        except ConstraintViolation as exc:
            return VerificationResult.invalid(exc.reason)

        name = name.strip()
        variants = generate_variants(parsed.given, parsed.family)
        queries = build_queries(name, variants)
        given_forms, family_forms = _token_forms(parsed, variants)

        for index, query in enumerate(queries):
            if index:
                self._sleep(self.query_delay)
            for hit in self._search(query, QUERY_LIMIT):
                if self._accepts(hit, name, given_forms, family_forms):
                    logger.info(f"[verify-match] name={name!r} query={query!r} title={hit.title!r}")
                    return VerificationResult.valid(hit.title, hit.snippet[:self.policy.description_length])

        return self._fallback(name, parsed)

    def _accepts(self, hit: SearchHit, name: str, given_forms: Sequence[str], family_forms: Sequence[str]) -> bool:
        title = hit.title.lower().strip()
        wanted = name.lower().strip()
        has_given = any(form in title for form in given_forms)
        has_family = any(form in title for form in family_forms)
        exact = title == wanted
        close = wanted in title or title in wanted
        if not (exact or close or (has_given and has_family)):
            return False

        has_indicator = self.policy.has_person_indicator(hit)
        if has_given and has_family and (has_indicator or self.policy.has_year(hit)):
            return True
        return exact and has_indicator

    def _fallback(self, name: str, parsed: ParsedName) -> VerificationResult:
        given, family = parsed.given.lower(), parsed.family.lower()
        for hit in self._search(name, FALLBACK_LIMIT):
            title = hit.title.lower()
            if (given in title or family in title) and self.policy.has_fallback_indicator(hit):
                excerpt = hit.snippet[:self.policy.review_excerpt_length]
                logger.info(f"[verify-review] name={name!r} title={hit.title!r}")
                return VerificationResult.needs_review(hit.title, f'Partial match found: "{hit.title}". {excerpt}')
        return VerificationResult.invalid(REASON_NOT_FOUND)

    def _search(self, query: str, limit: int) -> List[SearchHit]:
        try:
            return list(self.oracle.search(query, limit))
        except OracleError as exc:
            logger.warning(f"[verify] query failed query={query!r}: {exc}")
            return []


def _token_forms(parsed: ParsedName, variants: Sequence[str]) -> Tuple[List[str], List[str]]:
    given_forms = [parsed.given.lower()]
    family_forms = [parsed.family.lower()]
    for variant in variants:
        parts = variant.lower().split()
        if not parts:
            continue
        given_forms.append(parts[0])
        family_forms.append(parts[-1])
    return given_forms, family_forms
