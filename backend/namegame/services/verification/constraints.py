from dataclasses import dataclass
from typing import List, Tuple


# Required (given-name initial, family-name initial) pairs, in display order
LETTER_PAIRS: Tuple[str, ...] = ('צנ', 'תד', 'קכ', 'עג', 'יח', 'לט', 'מץ', 'רס', 'סו', 'טר')

REASON_MISSING_FAMILY_NAME = 'must contain a given name and a family name.'


class ConstraintViolation(ValueError):
    """A name failed a structural or letter-pair check."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


@dataclass(frozen=True)
class ParsedName:
    raw: str
    tokens: Tuple[str, ...]

    @property
    def given(self) -> str:
        return self.tokens[0]

    @property
    def family(self) -> str:
        return self.tokens[-1]

    @property
    def display(self) -> str:
        return ' '.join(self.tokens)


def split_name(name: str) -> List[str]:
    return (name or '').split()


def is_known_pair(letter_pair: str) -> bool:
    return letter_pair in LETTER_PAIRS


def validate(name: str, letter_pair: str) -> ParsedName:
    """Check a submitted name against a letter pair without touching the network.

    Checks run in a fixed order: token count, pair membership, then the
    initials of the first and last tokens. Raises ConstraintViolation with
    a human-readable reason on the first failure.
    """
    tokens = split_name(name)
    if len(tokens) < 2:
        raise ConstraintViolation(REASON_MISSING_FAMILY_NAME)

    if not is_known_pair(letter_pair):
        raise ConstraintViolation(
            f"letter pair '{letter_pair}' is not recognized; valid pairs: {', '.join(LETTER_PAIRS)}"
        )

    first_letter, last_letter = letter_pair[0], letter_pair[1]
    given, family = tokens[0], tokens[-1]
    if given[0] != first_letter or family[0] != last_letter:
        raise ConstraintViolation(
            f"given name must start with {first_letter} and family name with {last_letter}; "
            f"got {given[0]}{family[0]} instead of {letter_pair}"
        )

    return ParsedName(raw=name, tokens=tuple(tokens))
