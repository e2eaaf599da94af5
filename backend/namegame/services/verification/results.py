from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

VALID = 'valid'
INVALID = 'invalid'
MANUAL_REVIEW = 'manual_review'

REASON_VERIFIED = 'verified'
REASON_NEEDS_REVIEW = 'requires lecturer review'
REASON_NOT_FOUND = 'not found as a known public figure'
REASON_VERIFICATION_ERROR = 'verification error'
REASON_LECTURER_APPROVED = 'approved by lecturer'
REASON_LECTURER_REJECTED = 'rejected by lecturer'


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of verifying one submitted name.

    `status` is one of VALID, INVALID or MANUAL_REVIEW. Valid and
    manual-review results carry the matched oracle title and an excerpt;
    invalid results carry only the reason.
    """
    status: str
    reason: str
    match: Optional[str] = None
    description: Optional[str] = None
    manually_verified: bool = False
    verified_at: Optional[datetime] = None

    @classmethod
    def valid(cls, match: str, description: str) -> 'VerificationResult':
        return cls(status=VALID, reason=REASON_VERIFIED, match=match, description=description)

    @classmethod
    def invalid(cls, reason: str) -> 'VerificationResult':
        return cls(status=INVALID, reason=reason)

    @classmethod
    def needs_review(cls, match: str, description: str) -> 'VerificationResult':
        return cls(status=MANUAL_REVIEW, reason=REASON_NEEDS_REVIEW, match=match, description=description)

    @property
    def is_valid(self) -> bool:
        return self.status == VALID

    @property
    def needs_manual_review(self) -> bool:
        return self.status == MANUAL_REVIEW

    def to_dict(self) -> Dict[str, Any]:
        return {
            'status': self.status,
            'valid': self.is_valid,
            'reason': self.reason,
            'match': self.match,
            'description': self.description,
            'manually_verified': self.manually_verified,
            'verified_at': self.verified_at.isoformat() if self.verified_at else None,
        }
