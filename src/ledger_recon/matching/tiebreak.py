"""
Tie-break resolution for bank transactions with one or more candidates.

Rules, first match wins:
    1. A single candidate is matched (HIGH when date and amount are exact).
    2. Exactly one candidate with the same check number is matched (HIGH).
    3. Exactly one candidate closest in date is matched (MEDIUM).
    4. Anything still tied is AMBIGUOUS and left for review.
"""

from dataclasses import dataclass, field
from typing import Optional

from ..models.transaction import Confidence, MatchCandidate, MatchStatus


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving a non-empty candidate list."""

    status: MatchStatus
    confidence: Confidence
    reason: str
    candidate: Optional[MatchCandidate] = None
    tied: list[MatchCandidate] = field(default_factory=list)

    @property
    def is_match(self) -> bool:
        return self.status is MatchStatus.MATCHED


class TieBreakResolver:
    """Selects at most one candidate, or declares the set ambiguous."""

    def resolve(self, candidates: list[MatchCandidate]) -> Resolution:
        """
        Resolve candidates for a single bank transaction.

        Args:
            candidates: Non-empty candidate list in ledger order

        Returns:
            Resolution describing the match or the ambiguity
        """
        if not candidates:
            raise ValueError("resolve() requires at least one candidate")

        if len(candidates) == 1:
            return self._single(candidates[0])

        check_matches = [c for c in candidates if c.check_match]
        if len(check_matches) == 1:
            chosen = check_matches[0]
            return Resolution(
                status=MatchStatus.MATCHED,
                confidence=Confidence.HIGH,
                reason=(
                    f"Check number {chosen.transaction.check} matched "
                    f"among {len(candidates)} candidates"
                ),
                candidate=chosen,
            )

        # Date proximity is judged over every candidate, not just check misses
        closest_diff = min(c.date_diff for c in candidates)
        closest = [c for c in candidates if c.date_diff == closest_diff]
        if len(closest) == 1:
            return Resolution(
                status=MatchStatus.MATCHED,
                confidence=Confidence.MEDIUM,
                reason=(
                    f"Closest date among {len(candidates)} candidates, "
                    f"{closest_diff} day(s) date difference"
                ),
                candidate=closest[0],
            )

        return Resolution(
            status=MatchStatus.AMBIGUOUS,
            confidence=Confidence.REVIEW_REQUIRED,
            reason=(
                f"{len(closest)} ledger entries tied at {closest_diff} day(s) "
                f"date difference; manual review required"
            ),
            tied=closest,
        )

    @staticmethod
    def _single(candidate: MatchCandidate) -> Resolution:
        exact = candidate.date_diff == 0 and candidate.amount_diff == 0
        if exact:
            reason = "Exact amount and date match"
        elif candidate.amount_diff == 0:
            reason = f"Amount match, {candidate.date_diff} day(s) date difference"
        else:
            reason = (
                f"Amount within tolerance ({candidate.amount_diff} difference), "
                f"{candidate.date_diff} day(s) date difference"
            )
        return Resolution(
            status=MatchStatus.MATCHED,
            confidence=Confidence.HIGH if exact else Confidence.MEDIUM,
            reason=reason,
            candidate=candidate,
        )
