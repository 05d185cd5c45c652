"""Member service. Thin store of insured members, members are never deleted."""

from cardhub.models.member import Member
from cardhub.schemas.member import MemberBriefSchema, MemberFiltersSchema
from cardhub.services.base import BaseService
from sqlalchemy import or_
from sqlalchemy.orm import Query


class MemberService(BaseService[Member]):
    model = Member

    def _apply_filters(  # type: ignore[override]
        self, query: Query[Member], filters: MemberFiltersSchema
    ) -> Query[Member]:
        if filters.name is not None:
            query = query.filter(
                or_(
                    self.model.first_name.ilike(f"%{filters.name}%"),
                    self.model.last_name.ilike(f"%{filters.name}%"),
                )
            )
        if filters.company_id is not None:
            query = query.filter(self.model.company_id == filters.company_id)
        if filters.status is not None:
            query = query.filter(self.model.status == filters.status)
        return query


def member_brief(member: Member) -> MemberBriefSchema:
    return MemberBriefSchema(
        id=member.id,
        name=member.full_name,
        member_type=member.member_type,
        date_of_birth=member.date_of_birth,
    )
