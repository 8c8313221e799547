"""Lending system aggregate - sole owner of members, items, and the day clock"""

import copy
import uuid
from typing import Dict, List, Optional, Union

from lending_club.config import settings
from lending_club.domain.exceptions import AlreadyUnderContractError, DomainException, NegativeAmountError
from lending_club.domain.models import Contract, Item, Member
from lending_club.domain.result import SysError, SysResult
from lending_club.infrastructure.observability.logging import log_mutation, log_settlement
from lending_club.infrastructure.observability.metrics import record_mutation, record_settlement

MemberRef = Union[Member, uuid.UUID]
ItemRef = Union[Item, uuid.UUID]
ContractRef = Union[Contract, uuid.UUID]


def _ref_id(ref: Union[Member, Item, Contract, uuid.UUID]) -> uuid.UUID:
    """Lookups accept either an entity or its id"""
    return ref if isinstance(ref, uuid.UUID) else ref.id


class System:
    """
    In-memory aggregate root of the lending club.

    Values passed in are deep-copied into the store and every query returns
    deep copies, so callers never hold a reference into the canonical state.
    Mutations must come back through the update methods.

    Not thread-safe: callers sharing one instance must serialize access.
    """

    def __init__(self, listing_bonus: float | None = None, start_day: int | None = None):
        self._members: Dict[uuid.UUID, Member] = {}
        self._items: Dict[uuid.UUID, Item] = {}
        self._day = settings.start_day if start_day is None else start_day
        self.listing_bonus = settings.listing_bonus if listing_bonus is None else listing_bonus

    @property
    def day(self) -> int:
        return self._day

    def now(self) -> int:
        return self._day

    # ------------------------------------------------------------------
    # Members
    # ------------------------------------------------------------------

    def get_members(self) -> List[Member]:
        return [copy.deepcopy(m) for m in self._members.values()]

    def get_member(self, member: MemberRef) -> SysResult:
        stored = self._members.get(_ref_id(member))
        if stored is None:
            return SysResult.failure(SysError.DOESNT_EXIST)
        return SysResult.success(copy.deepcopy(stored))

    def exists_member(self, member: Member) -> bool:
        """True if any stored member collides with ``member`` under the dedup predicate"""
        return any(stored.matches(member) for stored in self._members.values())

    def add_member(self, member: Member) -> SysResult:
        if self.exists_member(member):
            return self._reject("add_member", member.id, SysError.ALREADY_EXISTS)

        self._members[member.id] = copy.deepcopy(member)
        return self._accept("add_member", member.id)

    def remove_member(self, member: MemberRef) -> SysResult:
        """Remove a member. Items and contracts referencing it are left in place."""
        member_id = _ref_id(member)
        if member_id not in self._members:
            return self._reject("remove_member", member_id, SysError.DOESNT_EXIST)

        del self._members[member_id]
        return self._accept("remove_member", member_id)

    def update_member(self, old_info: MemberRef, new_info: Member) -> SysResult:
        old_id = _ref_id(old_info)
        if old_id not in self._members:
            return self._reject("update_member", old_id, SysError.DOESNT_EXIST)

        # Map keys are derived from ids, so an update cannot re-key the entry
        if new_info.id != old_id:
            return self._reject("update_member", old_id, SysError.CANNOT_UPDATE)

        if any(stored.matches(new_info) for key, stored in self._members.items() if key != old_id):
            return self._reject("update_member", old_id, SysError.ALREADY_EXISTS)

        self._members[old_id] = copy.deepcopy(new_info)
        return self._accept("update_member", old_id)

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def get_items(self) -> List[Item]:
        return [copy.deepcopy(i) for i in self._items.values()]

    def get_items_for_member(self, member: MemberRef) -> List[Item]:
        member_id = _ref_id(member)
        return [copy.deepcopy(i) for i in self._items.values() if i.owner_id == member_id]

    def count_items_for_member(self, member: MemberRef) -> int:
        member_id = _ref_id(member)
        return sum(1 for i in self._items.values() if i.owner_id == member_id)

    def get_item(self, item: ItemRef) -> SysResult:
        stored = self._items.get(_ref_id(item))
        if stored is None:
            return SysResult.failure(SysError.DOESNT_EXIST)
        return SysResult.success(copy.deepcopy(stored))

    def add_item(self, item: Item) -> SysResult:
        """
        List a new item and grant its owner the listing bonus.

        The bonus is applied exactly once per successful insertion, through
        ``update_member``. Nothing is stored if any step fails.
        """
        if item.id in self._items:
            return self._reject("add_item", item.id, SysError.ALREADY_EXISTS)

        owner = self._members.get(item.owner_id)
        if owner is None:
            return self._reject("add_item", item.id, SysError.DOESNT_EXIST)

        try:
            item.validate_contracts()
        except DomainException:
            return self._reject("add_item", item.id, SysError.CANNOT_UPDATE)

        rewarded = copy.deepcopy(owner)
        try:
            rewarded.add_credits(self.listing_bonus)
            rewarded.own_item(item.id)
        except DomainException:
            return self._reject("add_item", item.id, SysError.CANNOT_UPDATE)

        if not self.update_member(owner, rewarded).ok:
            return self._reject("add_item", item.id, SysError.CANNOT_UPDATE)

        stored = copy.deepcopy(item)
        stored.refresh_active_contract(self._day)
        self._items[item.id] = stored
        return self._accept("add_item", item.id)

    def remove_item(self, item: ItemRef) -> SysResult:
        item_id = _ref_id(item)
        removed = self._items.pop(item_id, None)
        if removed is None:
            return self._reject("remove_item", item_id, SysError.CANNOT_DELETE)

        owner = self._members.get(removed.owner_id)
        if owner is not None and owner.has_item(item_id):
            owner.release_item(item_id)
        return self._accept("remove_item", item_id)

    def update_item(self, info: Item) -> SysResult:
        stored = self._items.get(info.id)
        if stored is None:
            return self._reject("update_item", info.id, SysError.CANNOT_UPDATE)

        new_owner = self._members.get(info.owner_id)
        if new_owner is None:
            return self._reject("update_item", info.id, SysError.CANNOT_UPDATE)

        try:
            info.validate_contracts()
        except DomainException:
            return self._reject("update_item", info.id, SysError.CANNOT_UPDATE)

        if stored.owner_id != info.owner_id:
            old_owner = self._members.get(stored.owner_id)
            if old_owner is not None and old_owner.has_item(info.id):
                old_owner.release_item(info.id)
            if not new_owner.has_item(info.id):
                new_owner.own_item(info.id)

        updated = copy.deepcopy(info)
        updated.refresh_active_contract(self._day)
        self._items[info.id] = updated
        return self._accept("update_item", info.id)

    # ------------------------------------------------------------------
    # Contracts
    # ------------------------------------------------------------------

    def add_contract(self, item: ItemRef, contract: Contract) -> SysResult:
        """
        Lend a stored item under ``contract``, checked against the current day.

        Both parties must be members, the contract owner must be the item's
        owner, an owner cannot borrow their own item, and the contract cannot
        start before the current day.
        """
        item_id = _ref_id(item)
        stored = self._items.get(item_id)
        if stored is None:
            return self._reject("add_contract", item_id, SysError.DOESNT_EXIST)

        if contract.owner_id not in self._members or contract.lendee_id not in self._members:
            return self._reject("add_contract", item_id, SysError.DOESNT_EXIST)

        if contract.owner_id != stored.owner_id or contract.lendee_id == stored.owner_id:
            return self._reject("add_contract", item_id, SysError.CANNOT_UPDATE)

        if contract.start_day < self._day:
            return self._reject("add_contract", item_id, SysError.CANNOT_UPDATE)

        candidate = copy.deepcopy(stored)
        try:
            candidate.add_contract(contract, self._day)
        except AlreadyUnderContractError:
            return self._reject("add_contract", item_id, SysError.CANNOT_UPDATE)

        self._items[item_id] = candidate
        return self._accept("add_contract", item_id, value=contract)

    def get_item_for_contract(self, contract: ContractRef) -> Optional[Item]:
        contract_id = _ref_id(contract)
        for item in self._items.values():
            if item.has_contract(contract_id):
                return copy.deepcopy(item)
        return None

    def get_contract(self, contract: ContractRef) -> SysResult:
        contract_id = _ref_id(contract)
        for item in self._items.values():
            found = item.find_contract(contract_id)
            if found is not None:
                return SysResult.success(found)
        return SysResult.failure(SysError.DOESNT_EXIST)

    # ------------------------------------------------------------------
    # Time
    # ------------------------------------------------------------------

    def incr_time(self) -> SysResult:
        """
        Close the current day and advance the clock by one.

        Every item whose history holds a contract active on the closing day
        moves ``cost_per_day`` from the lendee to the owner. All items are
        visited even after a failure; the last failure is reported.
        """
        settled_day = self._day
        self._day += 1

        outcome = SysResult.success()
        transfers = 0
        failures = 0
        credits_moved = 0.0

        for item in list(self._items.values()):
            contract = item.get_active_contract(settled_day)
            if contract is None:
                continue

            error = self._settle(item, contract)
            if error is None:
                transfers += 1
                credits_moved += item.cost_per_day
            else:
                failures += 1
                outcome = SysResult.failure(error)

        for item in self._items.values():
            item.refresh_active_contract(self._day)

        record_settlement(self._day, transfers, credits_moved, failures)
        log_settlement(settled_day, len(self._items), transfers, credits_moved, failures)
        return outcome

    def _settle(self, item: Item, contract: Contract) -> Optional[SysError]:
        """Apply one day of ``contract`` on ``item``. Returns the error, if any."""
        error = None

        # A vanished owner is skipped without failing the day
        owner = self._members.get(contract.owner_id)
        if owner is not None:
            credited = copy.deepcopy(owner)
            try:
                credited.add_credits(item.cost_per_day)
            except NegativeAmountError:
                error = SysError.CANNOT_UPDATE
            else:
                if not self.update_member(owner, credited).ok:
                    error = SysError.CANNOT_UPDATE

        lendee = self._members.get(contract.lendee_id)
        if lendee is None:
            return SysError.CANNOT_UPDATE

        debited = copy.deepcopy(lendee)
        try:
            debited.deduct_credits(item.cost_per_day)
        except NegativeAmountError:
            return SysError.CANNOT_UPDATE

        if not self.update_member(lendee, debited).ok:
            return SysError.CANNOT_UPDATE
        return error

    # ------------------------------------------------------------------

    def _accept(self, operation: str, entity_id: uuid.UUID, value=None) -> SysResult:
        record_mutation(operation)
        log_mutation(operation, str(entity_id), ok=True)
        return SysResult.success(value)

    def _reject(self, operation: str, entity_id: uuid.UUID, error: SysError) -> SysResult:
        record_mutation(operation, error.value)
        log_mutation(operation, str(entity_id), ok=False, error=error.value)
        return SysResult.failure(error)
