"""Group scoring over verified celebrity names.

Two scoring modes:

- regular: the whole group shares one submission and is scored as a team.
- nominal: each member submits alone; names are pooled and verified once
  for the group, but every member is credited for the verified names they
  personally submitted.

Lecturer overrides replace the classifier's verdict for the exact name.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from namegame.services.verification.constraints import LETTER_PAIRS
from namegame.services.verification.overrides import OverrideStore
from namegame.services.verification.results import VerificationResult

REGULAR = 'regular'
NOMINAL = 'nominal'
GROUP_TYPES = (REGULAR, NOMINAL)

# letter pair -> submitted names, in submission order
Answers = Mapping[str, Sequence[str]]


@dataclass(frozen=True)
class Member:
    id: int
    name: str


@dataclass(frozen=True)
class GroupRoster:
    id: int
    name: str
    type: str
    members: Tuple[Member, ...] = ()
    active_member: Optional[str] = None

    @property
    def member_count(self) -> int:
        return len(self.members)


@dataclass
class Submissions:
    by_group: Dict[int, Answers] = field(default_factory=dict)
    by_member: Dict[int, Answers] = field(default_factory=dict)


@dataclass
class MemberBreakdown:
    member_id: int
    member_name: str
    submitted: int
    verified: int
    answers: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'member_id': self.member_id,
            'member_name': self.member_name,
            'submitted': self.submitted,
            'verified': self.verified,
            'answers': list(self.answers),
        }


@dataclass
class GroupResult:
    group_id: int
    group_name: str
    type: str
    names: List[str]
    verification_results: Dict[str, VerificationResult]
    verified_names: int
    member_count: int
    active_member: Optional[str] = None
    members: List[MemberBreakdown] = field(default_factory=list)

    @property
    def total_names(self) -> int:
        return len(self.names)

    @property
    def avg_per_member(self) -> float:
        return self.verified_names / self.member_count if self.member_count else 0

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'group_id': self.group_id,
            'group_name': self.group_name,
            'type': self.type,
            'total_names': self.total_names,
            'verified_names': self.verified_names,
            'names': list(self.names),
            'verification_results': {n: r.to_dict() for n, r in self.verification_results.items()},
            'avg_per_member': self.avg_per_member,
            'member_count': self.member_count,
        }
        if self.type == REGULAR:
            data['active_member'] = self.active_member
        else:
            data['member_submissions'] = {m.member_name: m.submitted for m in self.members}
            data['member_verified_counts'] = {m.member_name: m.verified for m in self.members}
            data['members'] = [m.to_dict() for m in self.members]
        return data


@dataclass
class TypeSummary:
    group_count: int = 0
    member_count: int = 0
    verified_names: int = 0
    avg_per_group: float = 0
    avg_per_member: float = 0

    def add(self, result: GroupResult) -> None:
        self.group_count += 1
        self.member_count += result.member_count
        self.verified_names += result.verified_names

    def finalize(self) -> None:
        if self.group_count:
            self.avg_per_group = self.verified_names / self.group_count
        if self.member_count:
            self.avg_per_member = self.verified_names / self.member_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            'group_count': self.group_count,
            'member_count': self.member_count,
            'verified_names': self.verified_names,
            'avg_per_group': self.avg_per_group,
            'avg_per_member': self.avg_per_member,
        }


@dataclass
class AggregateResults:
    group_results: List[GroupResult]
    summary: Dict[str, TypeSummary]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'group_results': [r.to_dict() for r in self.group_results],
            'summary': {kind: s.to_dict() for kind, s in self.summary.items()},
        }


def unique_names(names: Iterable[Optional[str]]) -> List[str]:
    """Strip, drop blanks, and de-duplicate while keeping first-seen order."""
    seen: Dict[str, None] = {}
    for name in names:
        if not isinstance(name, str):
            continue
        cleaned = name.strip()
        if cleaned:
            seen.setdefault(cleaned, None)
    return list(seen)


def names_by_pair(answers: Optional[Answers]) -> Dict[str, List[str]]:
    answers = answers or {}
    return {pair: unique_names(answers.get(pair) or []) for pair in LETTER_PAIRS}


def verify_pairs(pair_names: Mapping[str, Sequence[str]], classifier) -> Dict[str, VerificationResult]:
    # a name listed under several pairs keeps the verdict of the later pair
    results: Dict[str, VerificationResult] = {}
    for pair in LETTER_PAIRS:
        names = pair_names.get(pair) or []
        if names:
            results.update(classifier.classify_batch(names, pair))
    return results


def apply_overrides(results: Dict[str, VerificationResult], names: Iterable[str], overrides: OverrideStore) -> None:
    for name in names:
        override = overrides.lookup(name)
        if override is not None:
            results[name] = override.as_result()


def count_verified(results: Mapping[str, VerificationResult], names: Iterable[str]) -> int:
    return sum(1 for name in names if name in results and results[name].is_valid)


def score_regular_group(group: GroupRoster, answers: Optional[Answers], classifier, overrides: OverrideStore) -> GroupResult:
    pair_names = names_by_pair(answers)
    names = unique_names(n for pair in LETTER_PAIRS for n in pair_names[pair])
    results = verify_pairs(pair_names, classifier)
    apply_overrides(results, names, overrides)
    return GroupResult(
        group_id=group.id,
        group_name=group.name,
        type=REGULAR,
        names=names,
        verification_results=results,
        verified_names=count_verified(results, names),
        member_count=group.member_count,
        active_member=group.active_member,
    )


def score_nominal_group(
    group: GroupRoster,
    member_answers: Mapping[int, Answers],
    classifier,
    overrides: OverrideStore,
) -> GroupResult:
    pooled: Dict[str, List[str]] = {pair: [] for pair in LETTER_PAIRS}
    member_names: Dict[int, List[str]] = {}
    for member in group.members:
        answers = member_answers.get(member.id) or {}
        submitted: List[str] = []
        for pair in LETTER_PAIRS:
            cleaned = [n.strip() for n in answers.get(pair) or [] if isinstance(n, str) and n.strip()]
            pooled[pair].extend(cleaned)
            submitted.extend(cleaned)
        member_names[member.id] = submitted

    pair_names = {pair: unique_names(names) for pair, names in pooled.items()}
    names = unique_names(n for pair in LETTER_PAIRS for n in pair_names[pair])
    results = verify_pairs(pair_names, classifier)
    apply_overrides(results, names, overrides)

    breakdown = []
    for member in group.members:
        submitted = member_names[member.id]
        breakdown.append(MemberBreakdown(
            member_id=member.id,
            member_name=member.name,
            submitted=len(submitted),
            verified=count_verified(results, unique_names(submitted)),
            answers=submitted,
        ))

    return GroupResult(
        group_id=group.id,
        group_name=group.name,
        type=NOMINAL,
        names=names,
        verification_results=results,
        verified_names=count_verified(results, names),
        member_count=group.member_count,
        members=breakdown,
    )


def compute_all_results(
    groups: Iterable[GroupRoster],
    submissions: Submissions,
    overrides: OverrideStore,
    classifier,
) -> AggregateResults:
    """Verify every unique name in every group and roll results up by group type.

    Runs to completion before returning; the classifier is called
    sequentially and paces itself against the oracle.
    """
    group_results: List[GroupResult] = []
    summary = {kind: TypeSummary() for kind in GROUP_TYPES}

    for group in groups:
        if group.type == REGULAR:
            result = score_regular_group(group, submissions.by_group.get(group.id), classifier, overrides)
        elif group.type == NOMINAL:
            result = score_nominal_group(group, submissions.by_member, classifier, overrides)
        else:
            continue
        group_results.append(result)
        summary[group.type].add(result)

    for type_summary in summary.values():
        type_summary.finalize()
    return AggregateResults(group_results=group_results, summary=summary)
