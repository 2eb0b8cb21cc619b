"""Shared fixtures: config isolation and the reference Person object."""

from dataclasses import dataclass

import pytest

from fieldview import attribute
from fieldview import config as config_module


@dataclass
class Person:
    firstName: str = "Joe"
    lastName: str = "Schmoe"
    age: float = 23.4
    height: float = attribute(6.083, final=True)
    numberOfFriends: int = attribute(3, visibility="protected")
    numberOfExes: int = attribute(2, visibility="protected")
    inARelationship: bool = attribute(False, visibility="private")
    thinksHeIsGreat: bool = attribute(True, visibility="private")
    timesCried: int = attribute(100, visibility="private", volatile=True)


@dataclass
class PersonWithPartner(Person):
    partner: object = attribute(None, visibility="private")


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep the user's config file and FIELDVIEW_* env vars out of tests."""
    monkeypatch.setattr(config_module, "CONFIG_DIR", tmp_path / "fieldview")
    monkeypatch.setattr(
        config_module, "CONFIG_FILE", tmp_path / "fieldview" / "config.json"
    )
    for name in (
        "FIELDVIEW_IDENTITY_HASH",
        "FIELDVIEW_HASH_SYMBOL",
        "FIELDVIEW_SEPARATOR",
        "FIELDVIEW_EQUALITY",
        "FIELDVIEW_DEFAULT_VISIBILITIES",
    ):
        monkeypatch.delenv(name, raising=False)
    config_module.reset_config()
    yield
    config_module.reset_config()


@pytest.fixture
def joe():
    return Person()


@pytest.fixture
def joe_with_partner():
    return PersonWithPartner()
