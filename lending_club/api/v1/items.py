"""/v1/items - Item listing, editing, and lending"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from lending_club.api.dependencies import get_system, parse_id, raise_for_result
from lending_club.api.v1.schemas import (
    ContractCreateRequest,
    ContractResponse,
    ItemCreateRequest,
    ItemResponse,
    ItemUpdateRequest,
)
from lending_club.domain.exceptions import InvalidContractError
from lending_club.domain.models import Contract, Item
from lending_club.domain.system import System

router = APIRouter()


@router.get("/items", response_model=List[ItemResponse])
def list_items(system: System = Depends(get_system)):
    return [ItemResponse.from_item(i) for i in system.get_items()]


@router.post("/items", response_model=ItemResponse, status_code=201)
def create_item(request_body: ItemCreateRequest, system: System = Depends(get_system)):
    """List a new item. The owner is granted the listing bonus."""
    owner = system.get_member(parse_id(request_body.owner_id, "owner"))
    raise_for_result(owner, "Owner not found")

    item = Item.create(
        name=request_body.name,
        description=request_body.description,
        category=request_body.category,
        owner=owner.value,
        cost_per_day=request_body.cost_per_day,
    )
    raise_for_result(system.add_item(item), "Item could not be listed")
    return ItemResponse.from_item(system.get_item(item).unwrap())


@router.get("/items/{item_id}", response_model=ItemResponse)
def get_item(item_id: str, system: System = Depends(get_system)):
    result = system.get_item(parse_id(item_id, "item"))
    raise_for_result(result, "Item not found")
    return ItemResponse.from_item(result.value)


@router.put("/items/{item_id}", response_model=ItemResponse)
def update_item(item_id: str, request_body: ItemUpdateRequest, system: System = Depends(get_system)):
    item_uuid = parse_id(item_id, "item")
    current = system.get_item(item_uuid)
    raise_for_result(current, "Item not found")

    edited = current.value
    for field_name, value in request_body.model_dump(exclude_none=True).items():
        setattr(edited, field_name, value)

    raise_for_result(system.update_item(edited), "Item could not be updated")
    return ItemResponse.from_item(system.get_item(item_uuid).unwrap())


@router.delete("/items/{item_id}", status_code=204)
def delete_item(item_id: str, system: System = Depends(get_system)):
    raise_for_result(system.remove_item(parse_id(item_id, "item")), "Item not found")


@router.post("/items/{item_id}/contracts", response_model=ContractResponse, status_code=201)
def lend_item(item_id: str, request_body: ContractCreateRequest, system: System = Depends(get_system)):
    """
    Lend an item to another member.

    Flow:
    1. Resolve item and lendee
    2. Default the window to start today and the price to cost_per_day * duration
    3. Attach the contract; 422 if the item is still under contract or the window overlaps
    """
    item_uuid = parse_id(item_id, "item")
    item = system.get_item(item_uuid)
    raise_for_result(item, "Item not found")
    lendee = system.get_member(parse_id(request_body.lendee_id, "lendee"))
    raise_for_result(lendee, "Lendee not found")

    start_day = request_body.start_day if request_body.start_day is not None else system.now()
    if start_day < system.now():
        raise HTTPException(status_code=422, detail=f"start_day cannot be before the current day {system.now()}")
    total_price = request_body.total_price
    if total_price is None:
        total_price = item.value.cost_per_day * request_body.duration_days

    try:
        contract = Contract(
            owner_id=item.value.owner_id,
            lendee_id=lendee.value.id,
            start_day=start_day,
            duration_days=request_body.duration_days,
            total_price=total_price,
        )
    except InvalidContractError as e:
        raise HTTPException(status_code=422, detail=str(e))

    raise_for_result(system.add_contract(item_uuid, contract), "Item is already under contract for these days")
    return ContractResponse.from_contract(contract, item_id=str(item_uuid))
