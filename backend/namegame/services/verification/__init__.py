"""Name verification services.

Structural checks, transliteration variants, the search oracle client,
the match classifier and the lecturer override table. Nothing here knows
about HTTP or the database; routes pull the configured classifier with
get_classifier().
"""

from flask import current_app

from .classifier import AcceptancePolicy, MatchClassifier
from .constraints import LETTER_PAIRS, ConstraintViolation, validate
from .oracle import OracleError, SearchHit, WikipediaOracle
from .overrides import ManualOverride, OverrideStore
from .results import INVALID, MANUAL_REVIEW, VALID, VerificationResult
from .variants import generate_variants

CLASSIFIER_EXTENSION = 'namegame.classifier'


def get_classifier() -> MatchClassifier:
    classifier = current_app.extensions.get(CLASSIFIER_EXTENSION)
    if classifier is None:
        classifier = MatchClassifier.from_config(current_app.config)
        current_app.extensions[CLASSIFIER_EXTENSION] = classifier
    return classifier
