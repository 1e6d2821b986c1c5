from typing import List, Optional, Any
from sqlalchemy import func, or_
from sqlalchemy.orm import Session
import logging

from core.errors import NotFound, Conflict, InvalidArgument
from core.sa.models import Member, MemberStatus, MembershipType, Circulation, CirculationStatus

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "name", "email", "phone", "address", "place", "member_class",
    "register_number", "membership_type", "status",
)

class MemberRepository:
    """Repository for managing Member entities."""

    def __init__(self, session: Session):
        """Initialize the repository with a database session.
        
        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_by_id(self, member_id: str) -> Optional[Member]:
        """Get a member by ID.
        
        Args:
            member_id: The ID of the member to retrieve
            
        Returns:
            The Member object if found, None otherwise
        """
        return self.session.query(Member).filter(Member.id == member_id).first()

    def get_by_ids(self, member_ids: List[str]) -> dict:
        if not member_ids:
            return {}
        members = self.session.query(Member).filter(Member.id.in_(set(member_ids))).all()
        return {member.id: member for member in members}

    def require(self, member_id: str) -> Member:
        member = self.get_by_id(member_id)
        if member is None:
            raise NotFound(f"Member '{member_id}' not found")
        return member

    def _search_query(self, query: Optional[str] = None, status: Optional[str] = None):
        base_query = self.session.query(Member)
        if query:
            pattern = f"%{query.strip()}%"
            base_query = base_query.filter(
                or_(
                    Member.name.ilike(pattern),
                    Member.email.ilike(pattern),
                    Member.phone.ilike(pattern)
                )
            )
        if status:
            base_query = base_query.filter(Member.status == status)
        return base_query

    def search_members(
        self,
        query: Optional[str] = None,
        status: Optional[str] = None,
        limit: int = 20,
        offset: int = 0
    ) -> List[Member]:
        """Search for members by name, email or phone.
        
        Args:
            query: The search query string
            status: Optional status filter
            limit: Maximum number of results to return (default: 20)
            offset: Number of results to skip
            
        Returns:
            List of matching Member objects ordered by name
        """
        return (
            self._search_query(query, status)
            .order_by(Member.name, Member.id)
            .offset(offset)
            .limit(limit)
            .all()
        )

    def count_members(self, query: Optional[str] = None, status: Optional[str] = None) -> int:
        return self._search_query(query, status).count()

    def create_member(
        self,
        name: str,
        email: str,
        phone: Optional[str] = None,
        address: Optional[str] = None,
        place: Optional[str] = None,
        member_class: Optional[str] = None,
        register_number: Optional[str] = None,
        membership_type: str = MembershipType.REGULAR.value,
        status: str = MemberStatus.ACTIVE.value
    ) -> Member:
        """Create a new member.
        
        Raises:
            InvalidArgument: If name or email is missing, or an enum value is unknown
        """
        if not name or not name.strip():
            raise InvalidArgument("Member name is required")
        if not email or not email.strip():
            raise InvalidArgument("Member email is required")
        self._validate_enums(membership_type=membership_type, status=status)

        member = Member(
            name=name.strip(),
            email=email.strip(),
            phone=phone,
            address=address,
            place=place,
            member_class=member_class,
            register_number=register_number,
            membership_type=membership_type,
            status=status
        )
        self.session.add(member)
        self.session.commit()
        logger.info(f"Registered member '{member.name}' ({member.id})")
        return member

    def update_member(self, member_id: str, **changes: Any) -> Member:
        """Update a member's details.
        
        Raises:
            NotFound: If the member does not exist
            InvalidArgument: Unknown fields, empty name/email or bad enum values
        """
        member = self.require(member_id)
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise InvalidArgument(f"Unknown member fields: {', '.join(sorted(unknown))}")
        for required in ("name", "email"):
            if required in changes and not (changes[required] or "").strip():
                raise InvalidArgument(f"Member {required} is required")
        self._validate_enums(
            membership_type=changes.get("membership_type"),
            status=changes.get("status")
        )

        for field_name, value in changes.items():
            setattr(member, field_name, value)
        self.session.commit()
        return member

    def delete_member(self, member_id: str) -> bool:
        """Delete a member with no books on loan.
        
        Returns:
            True if the member was deleted, False if not found

        Raises:
            Conflict: The member still holds an issued book
        """
        member = self.get_by_id(member_id)
        if not member:
            return False

        open_loans = (
            self.session.query(func.count(Circulation.id))
            .filter(
                Circulation.member_id == member_id,
                Circulation.status == CirculationStatus.ISSUED.value,
                Circulation.return_date.is_(None)
            )
            .scalar()
        )
        if open_loans:
            raise Conflict(f"Cannot delete '{member.name}': {open_loans} books are still issued to them")

        self.session.delete(member)
        self.session.commit()
        logger.info(f"Deleted member {member_id}")
        return True

    def count_by_status(self) -> dict:
        rows = self.session.query(Member.status, func.count(Member.id)).group_by(Member.status).all()
        return {status: count for status, count in rows}

    def _validate_enums(self, membership_type: Optional[str] = None, status: Optional[str] = None) -> None:
        if membership_type is not None and membership_type not in {t.value for t in MembershipType}:
            raise InvalidArgument(f"Invalid membership type '{membership_type}'")
        if status is not None and status not in {s.value for s in MemberStatus}:
            raise InvalidArgument(f"Invalid member status '{status}'")
