"""GET /v1/contracts/{contract_id} - Fetch contract details"""

from fastapi import APIRouter, Depends

from lending_club.api.dependencies import get_system, parse_id, raise_for_result
from lending_club.api.v1.schemas import ContractResponse
from lending_club.domain.system import System

router = APIRouter()


@router.get("/contracts/{contract_id}", response_model=ContractResponse)
def get_contract(contract_id: str, system: System = Depends(get_system)):
    contract_uuid = parse_id(contract_id, "contract")
    result = system.get_contract(contract_uuid)
    raise_for_result(result, "Contract not found")

    item = system.get_item_for_contract(contract_uuid)
    return ContractResponse.from_contract(result.value, item_id=str(item.id) if item else None)
