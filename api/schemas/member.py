# api/schemas/member.py
from datetime import datetime
from typing import Optional, List
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

class MemberBase(BaseModel):
    name: str
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    place: Optional[str] = None
    member_class: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("class", "member_class"),
        serialization_alias="class"
    )
    register_number: Optional[str] = None
    membership_type: str = "regular"
    status: str = "active"

class MemberCreate(MemberBase):
    pass

class MemberUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    place: Optional[str] = None
    member_class: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("class", "member_class")
    )
    register_number: Optional[str] = None
    membership_type: Optional[str] = None
    status: Optional[str] = None

class Member(MemberBase):
    id: str
    membership_date: datetime
    created_at: datetime
    updated_at: datetime
    
    model_config = ConfigDict(from_attributes=True)

class MemberList(BaseModel):
    items: List[Member]
    total: int
    page: int
    size: int
