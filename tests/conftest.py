"""Pytest fixtures for testing"""

import pytest
from fastapi.testclient import TestClient

from lending_club.api.main import create_app
from lending_club.domain.models import Category, Item, Member
from lending_club.domain.system import System


@pytest.fixture
def system() -> System:
    """Empty system on day 0 with the standard listing bonus"""
    return System(listing_bonus=100.0, start_day=0)


@pytest.fixture
def allan() -> Member:
    return Member.create("Allan", "allan@turing.com", "4602134567")


@pytest.fixture
def bob() -> Member:
    return Member.create("Bob", "bob@gmail.com", "46291328475")


@pytest.fixture
def monopoly(allan: Member) -> Item:
    """Game owned by allan, 20 credits per day"""
    return Item.create("Monopoly", "A Family Game", Category.GAME, allan, 20.0)


@pytest.fixture
def populated(system: System, allan: Member, bob: Member, monopoly: Item) -> System:
    """System holding allan, bob, and allan's monopoly listing"""
    system.add_member(allan)
    system.add_member(bob)
    system.add_item(monopoly)
    return system


@pytest.fixture
def client() -> TestClient:
    """FastAPI test client over a fresh, empty system"""
    app = create_app(System(listing_bonus=100.0, start_day=0))
    return TestClient(app)
