from typing import List, Optional, Sequence

from namegame.models import Group, Submission
from .aggregation import GroupRoster, Member, Submissions


def snapshot_groups(group_ids: Optional[Sequence[int]] = None) -> List[GroupRoster]:
    """Copy group rows into plain values so scoring never touches the session."""
    query = Group.query.order_by(Group.id)
    if group_ids:
        query = query.filter(Group.id.in_(list(group_ids)))
    rosters = []
    for group in query.all():
        rosters.append(GroupRoster(
            id=group.id,
            name=group.name,
            type=group.type,
            members=tuple(Member(id=m.id, name=m.name) for m in group.members),
            active_member=group.submitter.name if group.submitter else None,
        ))
    return rosters


def snapshot_submissions() -> Submissions:
    submissions = Submissions()
    for row in Submission.query.order_by(Submission.id).all():
        if row.group_id is not None:
            submissions.by_group[row.group_id] = row.answers
        elif row.student_id is not None:
            submissions.by_member[row.student_id] = row.answers
    return submissions
