# api/routes/members.py

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from core.events import notifier
from core.sa.database import get_db
from core.sa.repositories import MemberRepository
from api.deps import require_admin
from api.schemas.member import Member, MemberCreate, MemberList, MemberUpdate

router = APIRouter(prefix="/members", tags=["members"], dependencies=[Depends(require_admin)])

@router.get("", response_model=MemberList)
def get_members(
    query: Optional[str] = Query(None, description="Search members by name, email or phone"),
    member_status: Optional[str] = Query(None, alias="status", description="Filter by member status"),
    page: int = Query(1, ge=1, description="Page number"),
    size: int = Query(20, ge=1, le=100, description="Items per page"),
    db: Session = Depends(get_db)
):
    repo = MemberRepository(db)
    members = repo.search_members(query=query, status=member_status, limit=size, offset=(page - 1) * size)
    return MemberList(
        items=[Member.model_validate(member) for member in members],
        total=repo.count_members(query=query, status=member_status),
        page=page,
        size=size
    )

@router.post("", response_model=Member, status_code=status.HTTP_201_CREATED)
def create_member(member: MemberCreate, db: Session = Depends(get_db)):
    db_member = MemberRepository(db).create_member(**member.model_dump())
    notifier.publish("members", "insert", db_member.id)
    return db_member

@router.get("/{member_id}", response_model=Member)
def get_member(member_id: str, db: Session = Depends(get_db)):
    db_member = MemberRepository(db).get_by_id(member_id)
    if db_member is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Member not found")
    return db_member

@router.put("/{member_id}", response_model=Member)
def update_member(member_id: str, member: MemberUpdate, db: Session = Depends(get_db)):
    db_member = MemberRepository(db).update_member(member_id, **member.model_dump(exclude_unset=True))
    notifier.publish("members", "update", member_id)
    return db_member

@router.delete("/{member_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_member(member_id: str, db: Session = Depends(get_db)):
    if not MemberRepository(db).delete_member(member_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Member not found")
    notifier.publish("members", "delete", member_id)
