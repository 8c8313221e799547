"""Domain models - plain Python entities of the lending club"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Set

from lending_club.domain.exceptions import (
    AlreadyOwnedError,
    AlreadyUnderContractError,
    ContractOverlapError,
    InconsistentContractsError,
    InvalidContractError,
    NegativeAmountError,
    NotOwnedError,
)


class Category(str, Enum):
    """Kinds of lendable items"""

    TOOL = "Tool"
    VEHICLE = "Vehicle"
    GAME = "Game"
    TOY = "Toy"
    SPORT = "Sport"
    OTHER = "Other"


class Member:
    """
    Club participant holding a credit balance and a set of owned items.

    The balance is read-only from outside; it only moves through
    add_credits and deduct_credits.
    """

    def __init__(
        self,
        name: str,
        email: str,
        phone: str,
        credits: float = 0.0,
        id: Optional[uuid.UUID] = None,
        created_at: Optional[datetime] = None,
        owned_item_ids: Optional[Set[uuid.UUID]] = None,
    ):
        self.name = name
        self.email = email
        self.phone = phone
        self._credits = float(credits)
        self.id = id or uuid.uuid4()
        self.created_at = created_at or datetime.now()
        self.owned_item_ids = set(owned_item_ids or ())

    def __repr__(self) -> str:
        return (
            f"Member(name={self.name!r}, email={self.email!r}, phone={self.phone!r}, "
            f"credits={self._credits!r}, id={self.id!r})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Member):
            return NotImplemented
        return (
            self.id == other.id
            and self.name == other.name
            and self.email == other.email
            and self.phone == other.phone
            and self._credits == other._credits
            and self.created_at == other.created_at
            and self.owned_item_ids == other.owned_item_ids
        )

    __hash__ = None

    @property
    def credits(self) -> float:
        return self._credits

    @classmethod
    def create(cls, name: str, email: str, phone: str) -> "Member":
        """New member with zero credits, a fresh id and the current timestamp"""
        return cls(name=name, email=email, phone=phone)

    def add_credits(self, amount: float) -> None:
        if amount < 0:
            raise NegativeAmountError(f"Cannot add a negative amount: {amount}")
        self._credits += amount

    def deduct_credits(self, amount: float) -> None:
        """Withdraw credits. No floor is enforced, the balance may go negative."""
        if amount < 0:
            raise NegativeAmountError(f"Cannot deduct a negative amount: {amount}")
        self._credits -= amount

    def matches(self, other: "Member") -> bool:
        """
        Dedup predicate used to reject duplicate inserts.

        Two members collide if ANY of email, phone or id are equal. This is
        not an equivalence relation and is separate from ``==``.
        """
        return self.email == other.email or self.phone == other.phone or self.id == other.id

    def own_item(self, item_id: uuid.UUID) -> None:
        if item_id in self.owned_item_ids:
            raise AlreadyOwnedError(f"Member {self.id} already owns item {item_id}")
        self.owned_item_ids.add(item_id)

    def release_item(self, item_id: uuid.UUID) -> None:
        if item_id not in self.owned_item_ids:
            raise NotOwnedError(f"Member {self.id} does not own item {item_id}")
        self.owned_item_ids.remove(item_id)

    def has_item(self, item_id: uuid.UUID) -> bool:
        return item_id in self.owned_item_ids


@dataclass(frozen=True)
class Contract:
    """One lending period of an item, covering days [start_day, end_day)"""

    owner_id: uuid.UUID
    lendee_id: uuid.UUID
    start_day: int
    duration_days: int
    total_price: float
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    def __post_init__(self) -> None:
        if self.duration_days < 1:
            raise InvalidContractError(f"Duration must be at least one day, got {self.duration_days}")
        if self.total_price < 0:
            raise InvalidContractError(f"Total price cannot be negative, got {self.total_price}")

    @classmethod
    def create(
        cls,
        owner: Member,
        lendee: Member,
        start_day: int,
        duration_days: int,
        total_price: float,
    ) -> "Contract":
        return cls(
            owner_id=owner.id,
            lendee_id=lendee.id,
            start_day=start_day,
            duration_days=duration_days,
            total_price=total_price,
        )

    @property
    def end_day(self) -> int:
        return self.start_day + self.duration_days

    def is_active_on(self, day: int) -> bool:
        return self.start_day <= day < self.end_day

    def overlaps(self, other: "Contract") -> bool:
        return self.start_day < other.end_day and other.start_day < self.end_day


@dataclass
class Item:
    """Lendable object owned by a single member"""

    name: str
    description: str
    owner_id: uuid.UUID
    cost_per_day: float
    category: Category = Category.OTHER
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    active_contract: Optional[Contract] = None
    history: List[Contract] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def create(
        cls,
        name: str,
        description: str,
        category: Category,
        owner: Member,
        cost_per_day: float,
    ) -> "Item":
        return cls(
            name=name,
            description=description,
            category=category,
            owner_id=owner.id,
            cost_per_day=cost_per_day,
        )

    def add_contract(self, contract: Contract, current_day: int = 0) -> None:
        """
        Put the item under a new contract.

        Rejected while a contract is running on ``current_day``, and whenever
        the new window overlaps any contract already recorded in the history.
        Afterwards ``active_contract`` is the contract running on ``current_day``,
        which is None when the new contract starts later.
        """
        running = self.get_active_contract(current_day)
        if running is not None:
            raise AlreadyUnderContractError(
                f"Item {self.id} is under contract {running.id} until day {running.end_day}"
            )

        for existing in self.history:
            if existing.overlaps(contract):
                raise ContractOverlapError(
                    f"Contract days [{contract.start_day}, {contract.end_day}) overlap contract {existing.id}"
                )

        self.history.append(contract)
        self.active_contract = self.get_active_contract(current_day)

    def get_active_contract(self, current_day: int) -> Optional[Contract]:
        # History never holds overlapping windows, so at most one matches
        for contract in self.history:
            if contract.is_active_on(current_day):
                return contract
        return None

    def refresh_active_contract(self, current_day: int) -> None:
        self.active_contract = self.get_active_contract(current_day)

    def find_contract(self, contract_id: uuid.UUID) -> Optional[Contract]:
        for contract in self.history:
            if contract.id == contract_id:
                return contract
        return None

    def has_contract(self, contract_id: uuid.UUID) -> bool:
        return self.find_contract(contract_id) is not None

    def validate_contracts(self) -> None:
        """
        Check the contract bookkeeping of an item built outside the System.

        Raises:
            ContractOverlapError: two history contracts share a day.
            InconsistentContractsError: ``active_contract`` is missing from the
                history, or is held by someone other than the item's owner.
        """
        for index, contract in enumerate(self.history):
            for other in self.history[index + 1:]:
                if contract.overlaps(other):
                    raise ContractOverlapError(
                        f"Item {self.id} has overlapping contracts {contract.id} and {other.id}"
                    )

        if self.active_contract is None:
            return
        if self.active_contract not in self.history:
            raise InconsistentContractsError(
                f"Active contract {self.active_contract.id} of item {self.id} is not in its history"
            )
        if self.active_contract.owner_id != self.owner_id:
            raise InconsistentContractsError(
                f"Active contract {self.active_contract.id} names owner {self.active_contract.owner_id}, "
                f"item {self.id} belongs to {self.owner_id}"
            )
