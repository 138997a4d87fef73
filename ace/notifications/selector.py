from typing import List, Optional, Tuple

from ace.notifications.models import Candidate, UrgencyClass


def candidate_sort_key(candidate: Candidate) -> Tuple[int, object]:
    """Active before Passive, then earliest meeting start."""
    rank = 0 if candidate.urgency == UrgencyClass.ACTIVE else 1
    return rank, candidate.meeting.start_time


def sort_candidates(candidates: List[Candidate]) -> List[Candidate]:
    # sorted() is stable: equal keys keep generation order
    return sorted(candidates, key=candidate_sort_key)


def select_winner(candidates: List[Candidate]) -> Optional[Candidate]:
    if not candidates:
        return None
    return sort_candidates(candidates)[0]
