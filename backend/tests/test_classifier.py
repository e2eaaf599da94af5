import pytest

from conftest import FakeOracle, make_classifier, singer_hit
from namegame.services.verification import (
    AcceptancePolicy,
    INVALID,
    MANUAL_REVIEW,
    MatchClassifier,
    VALID,
    OracleError,
    SearchHit,
)
from namegame.services.verification.classifier import build_queries
from namegame.services.verification.results import (
    REASON_NOT_FOUND,
    REASON_VERIFICATION_ERROR,
)


def test_single_token_name_never_queries_oracle():
    oracle = FakeOracle(default=[singer_hit('יוסי חן')])
    result = make_classifier(oracle).classify('יוסי', 'יח')
    assert result.status == INVALID
    assert 'family name' in result.reason
    assert oracle.queries == []


def test_letter_mismatch_never_queries_oracle():
    oracle = FakeOracle(default=[singer_hit('יעל לוי')])
    result = make_classifier(oracle).classify('יעל לוי', 'יח')
    assert result.status == INVALID
    assert oracle.queries == []


@pytest.mark.parametrize('pair', ['אב', 'ZZ', 'יחי'])
def test_unknown_pair_is_invalid_regardless_of_name(pair):
    oracle = FakeOracle(default=[singer_hit('אבי ביטון')])
    result = make_classifier(oracle).classify('אבי ביטון', pair)
    assert result.status == INVALID
    assert oracle.queries == []


def test_singer_with_birth_year_is_valid():
    oracle = FakeOracle(hits={'יוסי חן': [SearchHit('יוסי חן', 'יוסי חן הוא זמר ישראלי שנולד בשנת 1985')]})
    result = make_classifier(oracle).classify('יוסי חן', 'יח')
    assert result.status == VALID
    assert result.is_valid
    assert result.match == 'יוסי חן'
    assert result.description.startswith('יוסי חן הוא זמר')
    # first query wins; nothing else is searched
    assert oracle.queries == [('יוסי חן', 5)]


def test_description_is_truncated():
    long_snippet = 'זמר ' * 100
    oracle = FakeOracle(default=[SearchHit('יוסי חן', long_snippet)])
    result = make_classifier(oracle).classify('יוסי חן', 'יח')
    assert result.status == VALID
    assert len(result.description) == 200


def test_year_alone_accepts_when_title_has_both_tokens():
    oracle = FakeOracle(default=[SearchHit('יוסי חן (מוזיקאי)', 'פעיל מאז 1999')])
    result = make_classifier(oracle).classify('יוסי חן', 'יח')
    assert result.status == VALID
    assert result.match == 'יוסי חן (מוזיקאי)'


def test_year_glued_to_hebrew_prefix_counts():
    policy = AcceptancePolicy()
    assert policy.has_year(SearchHit('x', 'ב1985 הוציא תקליט'))
    assert not policy.has_year(SearchHit('x', 'מספר 219850'))


def test_exact_title_without_indicator_or_year_is_not_accepted():
    oracle = FakeOracle(default=[SearchHit('יוסי חן', 'מושב בגליל')])
    result = make_classifier(oracle).classify('יוסי חן', 'יח')
    assert result.status == INVALID
    assert result.reason == REASON_NOT_FOUND


def test_transliteration_variant_title_is_matched():
    # the title uses a doubled vav spelling of the given name
    hit = SearchHit('יווסי חן', 'שחקן ישראלי')
    oracle = FakeOracle(hits={'יווסי חן': [hit]})
    result = make_classifier(oracle).classify('יוסי חן', 'יח')
    assert result.status == VALID
    assert result.match == 'יווסי חן'


def test_queries_follow_variant_order_then_original():
    oracle = FakeOracle()
    make_classifier(oracle).classify('יוסי חן', 'יח')
    sent = [q for q, _ in oracle.queries]
    assert sent[:4] == ['יוסי חן', '"יוסי חן"', 'יווסי חן', '"יווסי חן"']
    # main pass ends with bare and quoted original, then one broad fallback
    assert sent[-3:] == ['יוסי חן', '"יוסי חן"', 'יוסי חן']
    assert oracle.queries[-1] == ('יוסי חן', 10)


def test_build_queries_pairs_bare_and_quoted():
    assert build_queries('א ב', ['א ב', 'אא ב']) == ['א ב', '"א ב"', 'אא ב', '"אא ב"', 'א ב', '"א ב"']


def test_partial_hit_goes_to_manual_review():
    fallback_hit = SearchHit('משפחת חן', 'חן היה שם של זמר')
    oracle = FakeOracle(hits={})

    def search(query, limit=5):
        oracle.queries.append((query, limit))
        return [fallback_hit] if limit == 10 else []

    oracle.search = search
    result = make_classifier(oracle).classify('יוסי חן', 'יח')
    assert result.status == MANUAL_REVIEW
    assert result.needs_manual_review
    assert result.match == 'משפחת חן'
    assert result.description.startswith('Partial match found: "משפחת חן".')


def test_no_hits_is_not_found():
    result = make_classifier(FakeOracle()).classify('יוסי חן', 'יח')
    assert result.status == INVALID
    assert result.reason == REASON_NOT_FOUND


def test_oracle_error_on_one_query_moves_to_next_query():
    calls = []

    class FlakyOracle:
        def search(self, query, limit=5):
            calls.append(query)
            if len(calls) == 1:
                raise OracleError('timeout')
            return [singer_hit('יוסי חן')]

    result = make_classifier(FlakyOracle()).classify('יוסי חן', 'יח')
    assert result.status == VALID
    assert len(calls) == 2


def test_unexpected_error_retries_whole_classification():
    attempts = []
    sleeps = []

    class BrokenOnceOracle:
        def search(self, query, limit=5):
            attempts.append(query)
            if len(attempts) == 1:
                raise RuntimeError('boom')
            return [singer_hit('יוסי חן')]

    classifier = MatchClassifier(BrokenOnceOracle(), retry_backoff=2.0, sleep=sleeps.append)
    result = classifier.classify('יוסי חן', 'יח')
    assert result.status == VALID
    assert sleeps == [2.0]


def test_retries_exhausted_gives_verification_error():
    class AlwaysBroken:
        calls = 0

        def search(self, query, limit=5):
            AlwaysBroken.calls += 1
            raise RuntimeError('down')

    result = make_classifier(AlwaysBroken()).classify('יוסי חן', 'יח', max_retries=2)
    assert result.status == INVALID
    assert result.reason == REASON_VERIFICATION_ERROR
    # one attempt plus two retries
    assert AlwaysBroken.calls == 3


def test_query_pacing_uses_configured_delay():
    sleeps = []
    classifier = MatchClassifier(FakeOracle(), query_delay=0.15, sleep=sleeps.append)
    classifier.classify('יוסי חן', 'יח')
    assert sleeps
    assert set(sleeps) == {0.15}


def test_batch_skips_blanks_and_paces_only_oracle_lookups():
    sleeps = []
    oracle = FakeOracle(default=[singer_hit('יוסי חן')])
    classifier = MatchClassifier(oracle, query_delay=0, name_delay=0.6, sleep=sleeps.append)
    results = classifier.classify_batch(['יוסי חן', '', '   ', 'יעל לוי', 'יוסי'], 'יח')
    assert set(results) == {'יוסי חן', 'יעל לוי', 'יוסי'}
    assert results['יוסי חן'].status == VALID
    assert results['יעל לוי'].status == INVALID
    assert results['יוסי'].status == INVALID
    assert sleeps.count(0.6) == 1


def test_result_serialises_with_valid_flag():
    result = make_classifier(FakeOracle(default=[singer_hit('יוסי חן')])).classify('יוסי חן', 'יח')
    data = result.to_dict()
    assert data['status'] == 'valid'
    assert data['valid'] is True
    assert data['manually_verified'] is False
    assert data['verified_at'] is None


def test_middle_tokens_are_ignored_for_matching():
    oracle = FakeOracle(hits={'יוסי חן': [singer_hit('יוסי חן')]})
    result = make_classifier(oracle).classify('יוסי בן חן', 'יח')
    assert result.status == VALID
    assert result.match == 'יוסי חן'
    # variants are built from the first and last tokens only
    assert oracle.queries[0] == ('יוסי חן', 5)
