import pytest

from osu_country_lb.accounts import AccountStore
from osu_country_lb.errors import AccountAlreadyLinkedError, AccountNotLinkedError, AccountStoreError


@pytest.fixture
def store(tmp_path):
    account_store = AccountStore(str(tmp_path / "accounts.db"))
    account_store.initialize()
    yield account_store
    account_store.close()


def test_link_and_lookup(store) -> None:
    store.link(1001, "discord-user", 124493)
    assert store.get_osu_id(1001) == 124493


def test_unlinked_user(store) -> None:
    with pytest.raises(AccountNotLinkedError):
        store.get_osu_id(42)


def test_second_link_is_rejected(store) -> None:
    store.link(1001, "discord-user", 124493)
    with pytest.raises(AccountAlreadyLinkedError):
        store.link(1001, "discord-user", 2)
    assert store.get_osu_id(1001) == 124493


def test_links_survive_reopen(tmp_path) -> None:
    path = str(tmp_path / "accounts.db")
    first = AccountStore(path)
    first.link(7, "name", 99)
    first.close()

    second = AccountStore(path)
    assert second.get_osu_id(7) == 99
    second.close()


def test_store_reopens_after_close(store) -> None:
    store.link(1, "name", 10)
    store.close()
    assert store.get_osu_id(1) == 10


def test_unopenable_store_raises_store_error(store, monkeypatch) -> None:
    store.close()
    monkeypatch.setattr(store, "initialize", lambda: None)

    with pytest.raises(AccountStoreError, match="closed"):
        store.get_osu_id(1)
