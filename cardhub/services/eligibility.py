"""Eligibility service. Decides whether a member's coverage is currently valid."""

import datetime
from dataclasses import dataclass

from cardhub.models.member import Member, MemberStatus


@dataclass(frozen=True, slots=True)
class EligibilityResult:
    eligible: bool
    reason: str | None = None


class EligibilityService:
    def check(
        self, member: Member, on: datetime.date | None = None
    ) -> EligibilityResult:
        on = on or datetime.date.today()
        if member.status != MemberStatus.ACTIVE:
            return EligibilityResult(
                False, f"Member coverage is {member.status.value}"
            )
        if member.coverage_start is not None and member.coverage_start > on:
            return EligibilityResult(False, "Member coverage has not started")
        if member.coverage_end is not None and member.coverage_end < on:
            return EligibilityResult(False, "Member coverage has lapsed")
        return EligibilityResult(True)
