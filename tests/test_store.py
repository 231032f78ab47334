"""Test the pickup state store."""

from unittest.mock import AsyncMock, Mock, patch

import pytest

from custom_components.uddevalla_energi.schedule import WasteType
from custom_components.uddevalla_energi.store import PickupStateStore


@pytest.fixture
def mock_store():
    """Create a mock Home Assistant Store."""
    store = Mock()
    store.async_load = AsyncMock(return_value=None)
    store.async_delay_save = Mock()
    return store


@pytest.fixture
def state_store(mock_store):
    """Create a state store backed by the mock Store."""
    with patch("custom_components.uddevalla_energi.store.Store", return_value=mock_store):
        return PickupStateStore(Mock(), "test_entry")


def test_get_unwritten_key_returns_default(state_store):
    """Test that never written keys are absent."""
    assert state_store.get("matavfall") is None
    assert state_store.get("plantnumber", 0) == 0
    assert state_store.keys() == []


def test_set_persists_and_reads_back(state_store, mock_store):
    """Test that writes are readable and scheduled for saving."""
    state_store.set("plantnumber", 42)

    assert state_store.get("plantnumber") == 42
    assert state_store.keys() == ["plantnumber"]
    mock_store.async_delay_save.assert_called_once()
    data_func = mock_store.async_delay_save.call_args.args[0]
    assert data_func() == {"plantnumber": 42}


def test_subscriber_notified_on_every_set(state_store):
    """Test that each set notifies, even with an unchanged value."""
    handler = Mock()
    state_store.subscribe("matavfall", handler)

    state_store.set("matavfall", "2024-01-10")
    state_store.set("matavfall", "2024-01-10")
    state_store.set("restavfall", "2024-01-12")

    assert handler.call_count == 2
    handler.assert_called_with("matavfall", "2024-01-10")


def test_unsubscribe(state_store):
    """Test that an unsubscribed handler is no longer called."""
    handler = Mock()
    unsubscribe = state_store.subscribe("plantnumber", handler)

    unsubscribe()
    unsubscribe()
    state_store.set("plantnumber", 1)

    handler.assert_not_called()


def test_failing_subscriber_does_not_block_others(state_store):
    """Test that a raising subscriber does not stop the next one."""
    failing = Mock(side_effect=RuntimeError("boom"))
    other = Mock()
    state_store.subscribe("plantnumber", failing)
    state_store.subscribe("plantnumber", other)

    state_store.set("plantnumber", 5)

    assert state_store.get("plantnumber") == 5
    other.assert_called_once_with("plantnumber", 5)


def test_record_contains_only_known_types(state_store):
    """Test that the record maps waste types to their stored dates."""
    state_store.set("matavfall", "2024-01-10")
    state_store.set("plantnumber", 42)

    assert state_store.record() == {WasteType.ORGANIC: "2024-01-10"}


@pytest.mark.asyncio
async def test_load_restores_values(state_store, mock_store):
    """Test that stored values are restored on load."""
    mock_store.async_load.return_value = {"plantnumber": 42, "restavfall": "2024-01-12"}

    await state_store.async_load()

    assert state_store.get("plantnumber") == 42
    assert state_store.record() == {WasteType.RESIDUAL: "2024-01-12"}


@pytest.mark.asyncio
async def test_load_corrupted_starts_empty(state_store, mock_store):
    """Test that a failing load leaves the store empty."""
    mock_store.async_load.side_effect = ValueError("bad json")

    await state_store.async_load()

    assert state_store.keys() == []
