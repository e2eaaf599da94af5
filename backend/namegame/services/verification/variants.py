"""Alternate spellings for transliterated Hebrew names.

Foreign names written in Hebrew script have no single canonical spelling:
matres lectionis come and go, vav/yod get doubled, and the geresh on
borrowed consonants is typed several different ways. Searching for the
literal submission alone would reject many correct answers, so the
classifier searches for a small, ordered set of spellings instead.
"""

from typing import Dict, List, Sequence, Tuple

MAX_VARIANTS = 15

# pattern -> replacements; each rule rewrites every occurrence of its pattern
TRANSLITERATION_RULES: Tuple[Tuple[str, Sequence[str]], ...] = (
    ('א', ('', 'א')),
    ('ו', ('ו', 'וו')),
    ('י', ('י', 'יי')),
    ("ג'", ("ג'", 'ג׳', 'ג`', 'ג')),
    ('ג׳', ("ג'", 'ג׳', 'ג`', 'ג')),
    ("ז'", ("ז'", 'ז׳', 'ז`', 'ז')),
    ('ז׳', ("ז'", 'ז׳', 'ז`', 'ז')),
    ("ח'", ("ח'", 'ח׳', 'ח`', 'ח')),
    ('ח׳', ("ח'", 'ח׳', 'ח`', 'ח')),
    ("צ'", ("צ'", 'צ׳', 'צ`', 'צ')),
    ('צ׳', ("צ'", 'צ׳', 'צ`', 'צ')),
    ("ת'", ("ת'", 'ת׳', 'ת`', 'ת')),
    ('ת׳', ("ת'", 'ת׳', 'ת`', 'ת')),
    ('יי', ('י', 'יי')),
    ('וו', ('ו', 'וו')),
    ('אַ', ('א', 'אַ')),
    ('אָ', ('א', 'אָ', 'או')),
    ('או', ('או', 'אָ', 'ו')),
    # 'אי' for doubled yod comes after every other rewrite
    ('יי', ('אי',)),
)


def token_variants(token: str) -> List[str]:
    """Return the token followed by every single-rule rewrite of it."""
    variants: Dict[str, None] = {token: None}
    for pattern, replacements in TRANSLITERATION_RULES:
        if pattern not in token:
            continue
        for replacement in replacements:
            candidate = token.replace(pattern, replacement)
            if candidate and candidate != token:
                variants.setdefault(candidate, None)
    return list(variants)


def generate_variants(given: str, family: str, limit: int = MAX_VARIANTS) -> List[str]:
    literal = f"{given} {family}"
    variants: Dict[str, None] = {literal: None}
    family_variants = token_variants(family)
    for given_variant in token_variants(given):
        for family_variant in family_variants:
            variants.setdefault(f"{given_variant} {family_variant}", None)
    return list(variants)[:limit]
