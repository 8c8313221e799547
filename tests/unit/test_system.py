"""Unit tests for the System aggregate: members, items, and contracts"""

import uuid

from lending_club.domain.models import Category, Contract, Item, Member
from lending_club.domain.result import SysError, SysResult
from lending_club.domain.system import System


def test_add_member(system: System, allan: Member):
    assert system.add_member(allan) == SysResult.success()
    assert system.exists_member(allan)
    assert [m.id for m in system.get_members()] == [allan.id]


def test_add_member_duplicate_email(system: System):
    allan = Member.create("Allan", "allan@enigma.com", "0123456789")
    turing = Member.create("Turing", "allan@enigma.com", "012345678901")

    assert system.add_member(allan).ok
    result = system.add_member(turing)

    assert result.ok is False
    assert result.error is SysError.ALREADY_EXISTS
    assert len(system.get_members()) == 1


def test_add_member_duplicate_phone(system: System):
    allan = Member.create("Allan", "allan@enigma.com", "0123456789")
    turing = Member.create("Turing", "turing@enigma.com", "0123456789")

    assert system.add_member(allan).ok
    assert system.add_member(turing).error is SysError.ALREADY_EXISTS


def test_add_multiple_distinct_members(system: System):
    members = [
        Member.create("Allan", "allan@enigma.com", "0123456789"),
        Member.create("Turing", "allan@somethingelse.com", "01234543210"),
        Member.create("Turing", "turing2@enigma.com", "9876567890"),
        Member.create("Turing", "another@turing.com", "0987654321"),
    ]
    for member in members:
        assert system.add_member(member).ok
    assert len(system.get_members()) == 4


def test_exists_member(system: System, allan: Member, bob: Member):
    system.add_member(allan)
    assert system.exists_member(allan) is True
    assert system.exists_member(bob) is False


def test_remove_member(system: System, allan: Member):
    system.add_member(allan)

    assert system.remove_member(allan).ok
    assert system.exists_member(allan) is False
    assert system.get_members() == []


def test_remove_unknown_member(system: System, allan: Member, bob: Member):
    system.add_member(allan)

    result = system.remove_member(bob)

    assert result.error is SysError.DOESNT_EXIST
    assert len(system.get_members()) == 1


def test_get_member_by_entity_or_id(system: System, allan: Member):
    system.add_member(allan)

    assert system.get_member(allan).value.email == allan.email
    assert system.get_member(allan.id).value.email == allan.email
    assert system.get_member(uuid.uuid4()).error is SysError.DOESNT_EXIST


def test_update_member(system: System, allan: Member):
    system.add_member(allan)
    edited = system.get_member(allan).unwrap()
    edited.name = "Allan Turing"
    edited.add_credits(25.0)

    assert system.update_member(allan, edited).ok
    stored = system.get_member(allan).unwrap()
    assert stored.name == "Allan Turing"
    assert stored.credits == 25.0


def test_update_unknown_member(system: System, allan: Member):
    assert system.update_member(allan, allan).error is SysError.DOESNT_EXIST


def test_update_member_cannot_change_id(system: System, allan: Member):
    system.add_member(allan)
    impostor = Member.create("Allan", allan.email, allan.phone)

    assert system.update_member(allan, impostor).error is SysError.CANNOT_UPDATE
    assert system.get_member(allan).ok


def test_update_member_keeps_contact_details_unique(system: System, allan: Member, bob: Member):
    system.add_member(allan)
    system.add_member(bob)
    edited = system.get_member(bob).unwrap()
    edited.email = allan.email

    assert system.update_member(bob, edited).error is SysError.ALREADY_EXISTS
    assert system.get_member(bob).unwrap().email == "bob@gmail.com"


def test_snapshots_are_detached(system: System, allan: Member):
    """Neither the inserted value nor returned snapshots alias the stored member"""
    system.add_member(allan)
    allan.add_credits(1000.0)

    snapshot = system.get_member(allan).unwrap()
    snapshot.add_credits(50.0)
    snapshot.name = "Changed"

    stored = system.get_member(allan).unwrap()
    assert stored.credits == 0.0
    assert stored.name == "Allan"


def test_add_item_grants_listing_bonus(system: System, allan: Member, monopoly: Item):
    system.add_member(allan)

    assert system.add_item(monopoly).ok

    owner = system.get_member(allan).unwrap()
    assert owner.credits == 100.0
    assert owner.has_item(monopoly.id)
    assert system.get_item(monopoly).unwrap().name == "Monopoly"


def test_add_item_bonus_once_per_item(system: System, allan: Member, monopoly: Item):
    system.add_member(allan)
    siedler = Item.create("Siedler", "Another Family Game", Category.GAME, allan, 45.0)

    system.add_item(monopoly)
    system.add_item(siedler)
    duplicate = system.add_item(monopoly)

    assert duplicate.error is SysError.ALREADY_EXISTS
    assert system.get_member(allan).unwrap().credits == 200.0
    assert system.count_items_for_member(allan) == 2


def test_add_item_unknown_owner(system: System, monopoly: Item):
    result = system.add_item(monopoly)

    assert result.error is SysError.DOESNT_EXIST
    assert system.get_items() == []


def test_add_item_with_custom_bonus(allan: Member, monopoly: Item):
    system = System(listing_bonus=25.0)
    system.add_member(allan)
    system.add_item(monopoly)
    assert system.get_member(allan).unwrap().credits == 25.0


def test_add_item_negative_bonus_fails_cleanly(allan: Member, monopoly: Item):
    system = System(listing_bonus=-1.0)
    system.add_member(allan)

    assert system.add_item(monopoly).error is SysError.CANNOT_UPDATE
    assert system.get_items() == []
    assert system.get_member(allan).unwrap().credits == 0.0


def test_items_for_member(populated: System, allan: Member, bob: Member):
    assert [i.name for i in populated.get_items_for_member(allan)] == ["Monopoly"]
    assert populated.get_items_for_member(bob) == []
    assert populated.count_items_for_member(bob.id) == 0


def test_remove_item(populated: System, allan: Member, monopoly: Item):
    assert populated.remove_item(monopoly).ok

    assert populated.get_item(monopoly).error is SysError.DOESNT_EXIST
    assert not populated.get_member(allan).unwrap().has_item(monopoly.id)


def test_remove_unknown_item(populated: System, allan: Member):
    stray = Item.create("Ball", "Football", Category.SPORT, allan, 5.0)

    assert populated.remove_item(stray).error is SysError.CANNOT_DELETE
    assert len(populated.get_items()) == 1


def test_update_item(populated: System, monopoly: Item):
    edited = populated.get_item(monopoly).unwrap()
    edited.cost_per_day = 35.0
    edited.description = "Classic"

    assert populated.update_item(edited).ok
    stored = populated.get_item(monopoly).unwrap()
    assert stored.cost_per_day == 35.0
    assert stored.description == "Classic"


def test_update_unknown_item(populated: System, allan: Member):
    stray = Item.create("Ball", "Football", Category.SPORT, allan, 5.0)
    assert populated.update_item(stray).error is SysError.CANNOT_UPDATE


def test_update_item_moves_ownership(populated: System, allan: Member, bob: Member, monopoly: Item):
    edited = populated.get_item(monopoly).unwrap()
    edited.owner_id = bob.id

    assert populated.update_item(edited).ok
    assert not populated.get_member(allan).unwrap().has_item(monopoly.id)
    assert populated.get_member(bob).unwrap().has_item(monopoly.id)
    assert populated.count_items_for_member(bob) == 1


def test_update_item_unknown_owner(populated: System, monopoly: Item):
    edited = populated.get_item(monopoly).unwrap()
    edited.owner_id = uuid.uuid4()
    assert populated.update_item(edited).error is SysError.CANNOT_UPDATE


def test_add_contract(populated: System, allan: Member, bob: Member, monopoly: Item):
    contract = Contract.create(allan, bob, 0, 5, 100.0)

    result = populated.add_contract(monopoly, contract)

    assert result.ok
    stored = populated.get_item(monopoly).unwrap()
    assert stored.active_contract == contract
    assert stored.history == [contract]
    assert populated.get_contract(contract).unwrap() == contract
    assert populated.get_item_for_contract(contract).id == monopoly.id


def test_add_contract_rejects_overlap(populated: System, allan: Member, bob: Member, monopoly: Item):
    populated.add_contract(monopoly, Contract.create(allan, bob, 0, 5, 100.0))

    result = populated.add_contract(monopoly, Contract.create(allan, bob, 2, 5, 100.0))

    assert result.error is SysError.CANNOT_UPDATE
    assert len(populated.get_item(monopoly).unwrap().history) == 1


def test_add_contract_after_previous_expired(populated: System, allan: Member, bob: Member, monopoly: Item):
    populated.add_contract(monopoly, Contract.create(allan, bob, 0, 2, 40.0))
    follow_up = Contract.create(allan, bob, 2, 3, 60.0)

    assert populated.add_contract(monopoly, follow_up).error is SysError.CANNOT_UPDATE

    populated.incr_time()
    populated.incr_time()

    assert populated.add_contract(monopoly, follow_up).ok


def test_add_contract_unknown_parties(populated: System, allan: Member, monopoly: Item):
    stranger = Member.create("Jeff", "jeff@bezos.com", "0987654321")

    result = populated.add_contract(monopoly, Contract.create(allan, stranger, 0, 5, 0.0))

    assert result.error is SysError.DOESNT_EXIST


def test_add_contract_unknown_item(populated: System, allan: Member, bob: Member):
    stray = Item.create("Ball", "Football", Category.SPORT, allan, 5.0)
    result = populated.add_contract(stray, Contract.create(allan, bob, 0, 5, 0.0))
    assert result.error is SysError.DOESNT_EXIST


def test_add_contract_inconsistent_parties(populated: System, allan: Member, bob: Member, monopoly: Item):
    """Owners cannot borrow their own items, and only the owner can lend"""
    own_item = Contract.create(allan, allan, 0, 5, 0.0)
    wrong_owner = Contract.create(bob, bob, 0, 5, 0.0)
    not_owner = Contract(owner_id=bob.id, lendee_id=allan.id, start_day=0, duration_days=5, total_price=0.0)

    assert populated.add_contract(monopoly, own_item).error is SysError.CANNOT_UPDATE
    assert populated.add_contract(monopoly, wrong_owner).error is SysError.CANNOT_UPDATE
    assert populated.add_contract(monopoly, not_owner).error is SysError.CANNOT_UPDATE
    assert populated.get_item(monopoly).unwrap().history == []


def test_unknown_contract_lookups(populated: System, allan: Member, bob: Member):
    contract = Contract.create(allan, bob, 0, 5, 0.0)

    assert populated.get_item_for_contract(contract) is None
    assert populated.get_contract(contract).error is SysError.DOESNT_EXIST


def test_remove_member_leaves_items(populated: System, allan: Member, monopoly: Item):
    """Member removal does not cascade to listed items"""
    assert populated.remove_member(allan).ok
    assert populated.get_item(monopoly).ok


def test_future_lend_does_not_block_earlier_window(populated: System, allan: Member, bob: Member, monopoly: Item):
    """Accepting a non-overlapping lend does not depend on whether the clock ticked"""
    later = Contract.create(allan, bob, 6, 6, 120.0)
    earlier = Contract.create(allan, bob, 1, 3, 60.0)

    assert populated.add_contract(monopoly, later).ok
    assert populated.get_item(monopoly).unwrap().active_contract is None
    assert populated.add_contract(monopoly, earlier).ok
    assert len(populated.get_item(monopoly).unwrap().history) == 2


def test_add_contract_rejects_past_start(populated: System, allan: Member, bob: Member, monopoly: Item):
    populated.incr_time()
    populated.incr_time()

    result = populated.add_contract(monopoly, Contract.create(allan, bob, 1, 3, 60.0))

    assert result.error is SysError.CANNOT_UPDATE
    assert populated.get_item(monopoly).unwrap().history == []


def test_add_item_rejects_overlapping_history(system: System, allan: Member, bob: Member):
    system.add_member(allan)
    system.add_member(bob)
    item = Item.create("Saw", "", Category.TOOL, allan, 10.0)
    item.history = [Contract.create(allan, bob, 0, 5, 0.0), Contract.create(allan, bob, 2, 5, 0.0)]

    assert system.add_item(item).error is SysError.CANNOT_UPDATE
    assert system.get_items() == []
    assert system.get_member(allan).unwrap().credits == 0.0


def test_add_item_rejects_active_contract_outside_history(system: System, allan: Member, bob: Member):
    system.add_member(allan)
    system.add_member(bob)
    item = Item.create("Saw", "", Category.TOOL, allan, 10.0)
    item.history = [Contract.create(allan, bob, 0, 5, 0.0)]
    item.active_contract = Contract.create(allan, bob, 8, 2, 0.0)

    assert system.add_item(item).error is SysError.CANNOT_UPDATE
    assert system.get_items() == []


def test_add_item_with_prebuilt_history(system: System, allan: Member, bob: Member):
    """Items may arrive with contracts already attached; active_contract follows the day"""
    system.add_member(allan)
    system.add_member(bob)
    item = Item.create("Saw", "", Category.TOOL, allan, 10.0)
    running = Contract.create(allan, bob, 0, 3, 30.0)
    item.add_contract(Contract.create(allan, bob, 4, 2, 20.0), current_day=0)
    item.add_contract(running, current_day=0)

    assert system.add_item(item).ok
    assert system.get_item(item).unwrap().active_contract == running
    system.incr_time()
    assert system.get_member(allan).unwrap().credits == 110.0


def test_update_item_rejects_inconsistent_contracts(populated: System, allan: Member, bob: Member, monopoly: Item):
    edited = populated.get_item(monopoly).unwrap()
    edited.history = [Contract.create(allan, bob, 0, 5, 0.0), Contract.create(allan, bob, 4, 5, 0.0)]
    assert populated.update_item(edited).error is SysError.CANNOT_UPDATE

    edited = populated.get_item(monopoly).unwrap()
    edited.active_contract = Contract.create(allan, bob, 0, 5, 0.0)
    assert populated.update_item(edited).error is SysError.CANNOT_UPDATE

    assert populated.get_item(monopoly).unwrap().history == []


def test_update_item_cannot_move_ownership_while_lent(populated: System, allan: Member, bob: Member, monopoly: Item):
    populated.add_contract(monopoly, Contract.create(allan, bob, 0, 5, 100.0))
    edited = populated.get_item(monopoly).unwrap()
    edited.owner_id = bob.id

    assert populated.update_item(edited).error is SysError.CANNOT_UPDATE
    assert populated.get_member(allan).unwrap().has_item(monopoly.id)
