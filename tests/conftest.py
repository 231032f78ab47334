"""Shared fixtures for the Uddevalla Energi tests."""

from unittest.mock import AsyncMock, MagicMock, Mock, patch

import pytest

from custom_components.uddevalla_energi.coordinator import UddevallaEnergiCoordinator
from custom_components.uddevalla_energi.store import PickupStateStore


@pytest.fixture
def mock_hass():
    """Create a mock Home Assistant instance."""
    hass = MagicMock()
    hass.data = {}
    hass.async_add_executor_job = AsyncMock(side_effect=lambda func, *args: func(*args))
    hass.async_create_task = Mock(side_effect=lambda coro: coro.close())
    return hass


@pytest.fixture
def store():
    """Create a state store with a mocked backing Store."""
    backing = Mock()
    backing.async_load = AsyncMock(return_value=None)
    backing.async_delay_save = Mock()
    with patch("custom_components.uddevalla_energi.store.Store", return_value=backing):
        return PickupStateStore(Mock(), "test_entry")


@pytest.fixture
def client():
    """Create a mock API client."""
    return Mock()


@pytest.fixture
def coordinator(mock_hass, store, client):
    """Create a coordinator bypassing DataUpdateCoordinator.__init__."""
    coordinator = object.__new__(UddevallaEnergiCoordinator)
    coordinator.hass = mock_hass
    coordinator.entry = Mock(data={})
    coordinator.client = client
    coordinator.store = store
    coordinator._unsubscribers = []  # noqa: SLF001
    coordinator._last_status = None  # noqa: SLF001
    coordinator.async_refresh = AsyncMock()
    coordinator.async_set_updated_data = Mock()
    return coordinator
