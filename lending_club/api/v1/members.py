"""/v1/members - Member registration, lookup, and removal"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Request

from lending_club.api.dependencies import get_request_id, get_system, parse_id, raise_for_result
from lending_club.api.v1.schemas import ItemResponse, MemberCreateRequest, MemberResponse, MemberUpdateRequest
from lending_club.domain.models import Member
from lending_club.domain.system import System

router = APIRouter()


@router.get("/members", response_model=List[MemberResponse])
def list_members(system: System = Depends(get_system)):
    return [MemberResponse.from_member(m) for m in system.get_members()]


@router.post("/members", response_model=MemberResponse, status_code=201)
def create_member(request_body: MemberCreateRequest, request: Request, system: System = Depends(get_system)):
    """
    Register a new member with a zero balance.

    Rejected with 409 when the email, phone number or id collides with an
    existing member.
    """
    member = Member.create(request_body.name, request_body.email, request_body.phone)
    result = system.add_member(member)
    if not result.ok:
        logging.warning(
            "Duplicate member rejected",
            extra={"request_id": get_request_id(request), "email": request_body.email},
        )
    raise_for_result(result, "A member with this email or phone number already exists")
    return MemberResponse.from_member(system.get_member(member).unwrap())


@router.get("/members/{member_id}", response_model=MemberResponse)
def get_member(member_id: str, system: System = Depends(get_system)):
    result = system.get_member(parse_id(member_id, "member"))
    raise_for_result(result, "Member not found")
    return MemberResponse.from_member(result.value)


@router.put("/members/{member_id}", response_model=MemberResponse)
def update_member(member_id: str, request_body: MemberUpdateRequest, system: System = Depends(get_system)):
    """Edit contact details. Credits are only moved by listing and settlement."""
    member_uuid = parse_id(member_id, "member")
    current = system.get_member(member_uuid)
    raise_for_result(current, "Member not found")

    edited = current.value
    for field_name, value in request_body.model_dump(exclude_none=True).items():
        setattr(edited, field_name, value)

    raise_for_result(system.update_member(member_uuid, edited), "Email or phone number already in use")
    return MemberResponse.from_member(system.get_member(member_uuid).unwrap())


@router.delete("/members/{member_id}", status_code=204)
def delete_member(member_id: str, system: System = Depends(get_system)):
    raise_for_result(system.remove_member(parse_id(member_id, "member")), "Member not found")


@router.get("/members/{member_id}/items", response_model=List[ItemResponse])
def list_member_items(member_id: str, system: System = Depends(get_system)):
    member_uuid = parse_id(member_id, "member")
    raise_for_result(system.get_member(member_uuid), "Member not found")
    return [ItemResponse.from_item(i) for i in system.get_items_for_member(member_uuid)]
