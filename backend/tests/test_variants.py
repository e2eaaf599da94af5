import pytest

from namegame.services.verification.variants import MAX_VARIANTS, generate_variants, token_variants


@pytest.mark.parametrize('given,family', [
    ('יוסי', 'חן'),
    ("ג'ורג'", 'קלוני'),
    ('אוריאל', 'וייסמן'),
    ('אבא', 'אבן'),
    ('דן', 'כץ'),
])
def test_literal_form_comes_first_and_output_is_bounded(given, family):
    variants = generate_variants(given, family)
    assert variants[0] == f'{given} {family}'
    assert len(variants) <= MAX_VARIANTS
    assert len(variants) == len(set(variants))


def test_name_without_rule_patterns_has_only_literal():
    assert generate_variants('דן', 'כץ') == ['דן כץ']


def test_token_variants_doubles_vav_and_yod():
    assert token_variants('יוסי') == ['יוסי', 'יווסי', 'ייוסיי']


def test_doubled_yod_collapses_and_gains_alef_spelling_last():
    variants = token_variants('וייסמן')
    assert 'ויסמן' in variants
    assert variants[-1] == 'ואיסמן'


def test_token_variants_handles_geresh_spellings():
    variants = token_variants("ג'ון")
    assert 'ג׳ון' in variants
    assert 'גון' in variants
    assert 'ג`ון' in variants


def test_optional_alef_is_dropped_but_never_to_empty():
    assert 'ריל' in token_variants('אריאל')
    assert '' not in token_variants('א')


def test_variants_cross_given_and_family_forms():
    variants = generate_variants('יוסי', 'חן')
    assert 'יווסי חן' in variants
    assert all(v.endswith(' חן') for v in variants)


def test_limit_truncates_in_insertion_order():
    full = generate_variants('אוריאל', 'וייסמן', limit=100)
    assert len(full) > MAX_VARIANTS
    assert generate_variants('אוריאל', 'וייסמן') == full[:MAX_VARIANTS]
