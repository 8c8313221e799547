"""Pydantic schemas for API request/response validation"""

from typing import List, Optional

from pydantic import BaseModel, Field

from lending_club.domain.models import Category, Contract, Item, Member


class MemberCreateRequest(BaseModel):
    """Request body for POST /v1/members"""

    name: str = Field(..., min_length=1, description="Display name")
    email: str = Field(..., min_length=1, description="Contact email, unique across members")
    phone: str = Field(..., min_length=1, description="Phone number, unique across members")


class MemberUpdateRequest(BaseModel):
    """Request body for PUT /v1/members/{member_id}; omitted fields are kept"""

    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = Field(None, min_length=1)


class MemberResponse(BaseModel):
    """Member snapshot"""

    member_id: str
    name: str
    email: str
    phone: str
    credits: float
    item_count: int
    created_at: str

    @classmethod
    def from_member(cls, member: Member) -> "MemberResponse":
        return cls(
            member_id=str(member.id),
            name=member.name,
            email=member.email,
            phone=member.phone,
            credits=member.credits,
            item_count=len(member.owned_item_ids),
            created_at=member.created_at.isoformat(),
        )


class ItemCreateRequest(BaseModel):
    """Request body for POST /v1/items"""

    owner_id: str = Field(..., description="Member listing the item")
    name: str = Field(..., min_length=1)
    description: str = ""
    category: Category = Category.OTHER
    cost_per_day: float = Field(..., ge=0, description="Credits charged to the lendee per day")


class ItemUpdateRequest(BaseModel):
    """Request body for PUT /v1/items/{item_id}; omitted fields are kept"""

    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    category: Optional[Category] = None
    cost_per_day: Optional[float] = Field(None, ge=0)


class ContractCreateRequest(BaseModel):
    """Request body for POST /v1/items/{item_id}/contracts"""

    lendee_id: str = Field(..., description="Member borrowing the item")
    duration_days: int = Field(..., ge=1)
    start_day: Optional[int] = Field(None, ge=0, description="Defaults to the current day")
    total_price: Optional[float] = Field(None, ge=0, description="Defaults to cost_per_day * duration_days")


class ContractResponse(BaseModel):
    """Contract snapshot"""

    contract_id: str
    item_id: Optional[str] = None
    owner_id: str
    lendee_id: str
    start_day: int
    end_day: int
    duration_days: int
    total_price: float

    @classmethod
    def from_contract(cls, contract: Contract, item_id: Optional[str] = None) -> "ContractResponse":
        return cls(
            contract_id=str(contract.id),
            item_id=item_id,
            owner_id=str(contract.owner_id),
            lendee_id=str(contract.lendee_id),
            start_day=contract.start_day,
            end_day=contract.end_day,
            duration_days=contract.duration_days,
            total_price=contract.total_price,
        )


class ItemResponse(BaseModel):
    """Item snapshot with its contract history"""

    item_id: str
    owner_id: str
    name: str
    description: str
    category: Category
    cost_per_day: float
    active_contract: Optional[ContractResponse] = None
    history: List[ContractResponse]
    created_at: str

    @classmethod
    def from_item(cls, item: Item) -> "ItemResponse":
        item_id = str(item.id)
        return cls(
            item_id=item_id,
            owner_id=str(item.owner_id),
            name=item.name,
            description=item.description,
            category=item.category,
            cost_per_day=item.cost_per_day,
            active_contract=(
                ContractResponse.from_contract(item.active_contract, item_id)
                if item.active_contract is not None
                else None
            ),
            history=[ContractResponse.from_contract(c, item_id) for c in item.history],
            created_at=item.created_at.isoformat(),
        )


class AdvanceTimeRequest(BaseModel):
    """Request body for POST /v1/time/advance"""

    days: int = Field(1, ge=1, le=365)


class ClockResponse(BaseModel):
    """Current logical day, plus settlement outcome after an advance"""

    day: int
    ok: bool = True
    error: Optional[str] = None
