"""Tests for src/sync/store.py: confirmed/draft snapshot ownership."""

import dataclasses

import pytest

from src.admin.api import SettingsApi
from src.gateway.errors import NetworkError
from src.sync.store import ConfigurationStore


@pytest.fixture
def store(make_gateway):
    return ConfigurationStore(SettingsApi(make_gateway()))


class TestLoad:

    async def test_sets_both_snapshots(self, store, snapshot):
        assert not store.loaded
        await store.load()
        assert store.loaded
        assert store.confirmed == snapshot
        assert store.draft == snapshot

    async def test_draft_is_a_separate_object(self, store):
        await store.load()
        assert store.draft is not store.confirmed
        assert store.draft.api_keys is not store.confirmed.api_keys
        assert store.draft.admin_api_keys is not store.confirmed.admin_api_keys

    async def test_in_place_draft_edit_stays_pending(self, store):
        await store.load()
        store.draft.api_keys.append("k2")
        assert store.confirmed.api_keys == ["k1"]
        assert store.pending_delta() == {"api_keys": ["k1", "k2"]}

    async def test_failure_keeps_empty_state(self, make_gateway):
        store = ConfigurationStore(SettingsApi(make_gateway(credential=None)))
        with pytest.raises(Exception):
            await store.load()
        assert store.confirmed is None
        assert store.draft is None

    async def test_failure_keeps_previous_state(self, store, fake_admin, snapshot):
        await store.load()
        edited = dataclasses.replace(store.draft, human_name="User")
        store.set_draft(edited)
        fake_admin.fail_next = (503, {"message": "maintenance"})
        with pytest.raises(Exception):
            await store.load()
        assert store.confirmed == snapshot
        assert store.draft == edited

    async def test_reload_replaces_draft(self, store, fake_admin):
        await store.load()
        store.set_draft(dataclasses.replace(store.draft, human_name="User"))
        fake_admin.settings["assistant_name"] = "Claude"
        await store.load()
        assert store.draft.human_name == "Human"
        assert store.confirmed.assistant_name == "Claude"

    async def test_network_error_propagates(self, store, fake_admin):
        async def broken(*args, **kwargs):
            raise NetworkError("Cannot reach admin service")

        store._api.get = broken
        with pytest.raises(NetworkError):
            await store.load()


class TestEdits:

    async def test_pending_delta(self, store):
        await store.load()
        assert store.pending_delta() == {}
        store.set_draft(dataclasses.replace(store.draft, padtxt_length=64))
        assert store.pending_delta() == {"padtxt_length": 64}

    async def test_set_draft_copies_lists(self, store):
        await store.load()
        edited = dataclasses.replace(store.draft, api_keys=["k1", "k2"])
        store.set_draft(edited)
        edited.api_keys.append("k3")
        assert store.draft.api_keys == ["k1", "k2"]

    async def test_apply_confirmed(self, store):
        await store.load()
        confirmed = store.apply_confirmed({"api_keys": ["k1", "k2"]})
        assert confirmed.api_keys == ["k1", "k2"]
        assert store.confirmed is confirmed
        assert store.draft.api_keys == ["k1"]

    def test_requires_load(self, store, snapshot):
        with pytest.raises(RuntimeError):
            store.set_draft(snapshot)
        with pytest.raises(RuntimeError):
            store.apply_confirmed({})
        with pytest.raises(RuntimeError):
            store.pending_delta()
