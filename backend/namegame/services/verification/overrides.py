from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .results import (
    INVALID,
    REASON_LECTURER_APPROVED,
    REASON_LECTURER_REJECTED,
    VALID,
    VerificationResult,
)


@dataclass(frozen=True)
class ManualOverride:
    name: str
    verdict: bool
    reason: str
    verified_at: datetime
    manually_verified: bool = True

    def as_result(self) -> VerificationResult:
        return VerificationResult(
            status=VALID if self.verdict else INVALID,
            reason=self.reason,
            manually_verified=self.manually_verified,
            verified_at=self.verified_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'valid': self.verdict,
            'reason': self.reason,
            'manually_verified': self.manually_verified,
            'verified_at': self.verified_at.isoformat(),
        }


class OverrideStore:
    """Lecturer verdicts keyed by the literal submitted name.

    Lookups are exact: an override for one spelling never applies to a
    transliteration variant of it. Lives in process memory until reset().
    """

    def __init__(self):
        self._overrides: Dict[str, ManualOverride] = {}

    def set(self, name: str, verdict: bool) -> ManualOverride:
        key = _require_name(name)
        override = ManualOverride(
            name=key,
            verdict=bool(verdict),
            reason=REASON_LECTURER_APPROVED if verdict else REASON_LECTURER_REJECTED,
            verified_at=datetime.now(timezone.utc),
        )
        self._overrides[key] = override
        return override

    def clear(self, name: str) -> bool:
        return self._overrides.pop(_require_name(name), None) is not None

    def lookup(self, name: str) -> Optional[ManualOverride]:
        return self._overrides.get(name)

    def reset(self) -> None:
        self._overrides.clear()

    def snapshot(self) -> Dict[str, ManualOverride]:
        return dict(self._overrides)

    def __contains__(self, name: object) -> bool:
        return name in self._overrides

    def __len__(self) -> int:
        return len(self._overrides)


def _require_name(name: str) -> str:
    if not name or not str(name).strip():
        raise ValueError('name is required')
    return name
