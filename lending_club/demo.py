"""Demo data for a freshly started lending club"""

import logging
from typing import List

from lending_club.config import settings
from lending_club.domain.models import Category, Contract, Item, Member
from lending_club.domain.system import System


def seed_demo(system: System, opening_credits: float | None = None) -> None:
    """
    Populate ``system`` with four members, four items and a few contracts.

    Every member gets an opening top-up so lendees start with a positive
    balance. Contracts are anchored on the system's current day.

    Raises:
        RuntimeError: if the system rejects any of the demo records, which
            only happens when it already holds colliding members.
    """
    if opening_credits is None:
        opening_credits = settings.demo_opening_credits
    today = system.now()

    members: List[Member] = [
        Member.create("Allan", "allan@enigma.com", "0123456789"),
        Member.create("Tina", "tina@somethingelse.com", "01234543210"),
        Member.create("Turing", "turing@enigma.com", "9876567890"),
        Member.create("Jeff", "jeff@bezos.com", "0987654321"),
    ]
    allan, tina, turing, _ = members

    for member in members:
        _expect(system.add_member(member), f"add member {member.name}")
        topped_up = system.get_member(member).unwrap()
        topped_up.add_credits(opening_credits)
        _expect(system.update_member(member, topped_up), f"top up {member.name}")

    monopoly = Item.create("Monopoly", "Family Game", Category.GAME, allan, 30.0)
    siedler = Item.create("Siedler", "Another Family Game", Category.GAME, allan, 45.0)
    t_rex = Item.create("T-Rex", "Dinosaur", Category.TOY, turing, 10.0)
    hammer = Item.create("Hammer", "A useful tool", Category.TOOL, tina, 150.0)

    for item in (monopoly, siedler, t_rex, hammer):
        _expect(system.add_item(item), f"add item {item.name}")

    contracts = [
        (monopoly, Contract.create(allan, tina, today + 6, 6, monopoly.cost_per_day * 6)),
        (siedler, Contract.create(allan, tina, today + 12, 9, siedler.cost_per_day * 9)),
        (hammer, Contract.create(tina, turing, today, 10, hammer.cost_per_day * 10)),
        (t_rex, Contract.create(turing, tina, today, 5, t_rex.cost_per_day * 5)),
    ]
    for item, contract in contracts:
        _expect(system.add_contract(item, contract), f"lend {item.name}")

    logging.info(
        "Demo data seeded",
        extra={"members": len(members), "items": 4, "contracts": len(contracts), "day": today},
    )


def _expect(result, action: str) -> None:
    if not result.ok:
        raise RuntimeError(f"Demo seeding failed to {action}: {result.error.value}")
