"""Tests for the app module (events, dependencies, controller)."""
import threading
from unittest.mock import MagicMock

import pytest

from app.controller import AppController
from app.dependencies import AppDependencies, create_dependencies
from app.events import Event, EventBus, EventType
from app.menu_state import MenuEntry, MenuStateStore
from config import STORAGE, UI
from config.exceptions import SamplerTransportError
from config.settings import MonitorSettings
from monitor.sampler import LsofSampler, PsutilSampler
from tests.mocks import LSOF_CURL, LSOF_NODE, MockSampler


class TestEventBus:
    """Tests for EventBus."""

    def test_subscribe_and_publish(self):
        """Events should be delivered to subscribers."""
        bus = EventBus(async_mode=False)
        received = []

        bus.subscribe(EventType.POLL_COMPLETED, received.append)
        bus.publish(EventType.POLL_COMPLETED, {"visible": 3})

        assert len(received) == 1
        assert received[0].data["visible"] == 3

    def test_multiple_subscribers(self):
        bus = EventBus(async_mode=False)
        count = [0]

        def handler1(event):
            count[0] += 1

        def handler2(event):
            count[0] += 10

        bus.subscribe(EventType.POLL_FAILED, handler1)
        bus.subscribe(EventType.POLL_FAILED, handler2)
        bus.publish(EventType.POLL_FAILED)

        assert count[0] == 11
        assert bus.get_subscriber_count(EventType.POLL_FAILED) == 2

    def test_unsubscribe(self):
        bus = EventBus(async_mode=False)
        received = []

        bus.subscribe(EventType.POLL_COMPLETED, received.append)
        assert bus.unsubscribe(EventType.POLL_COMPLETED, received.append) is True
        assert bus.unsubscribe(EventType.POLL_COMPLETED, received.append) is False
        bus.publish(EventType.POLL_COMPLETED)

        assert received == []

    def test_handler_error_does_not_stop_others(self):
        """A failing handler should not prevent other handlers from running."""
        bus = EventBus(async_mode=False)
        received = []

        def bad_handler(event):
            raise ValueError("handler bug")

        bus.subscribe(EventType.POLL_FAILED, bad_handler)
        bus.subscribe(EventType.POLL_FAILED, received.append)
        bus.publish(EventType.POLL_FAILED)

        assert len(received) == 1

    def test_async_mode_delivers_on_worker(self):
        bus = EventBus(async_mode=True)
        delivered = threading.Event()
        threads = []

        def handler(event):
            threads.append(threading.current_thread().name)
            delivered.set()

        try:
            bus.subscribe(EventType.POLL_COMPLETED, handler)
            bus.publish(EventType.POLL_COMPLETED, {"visible": 1})
            assert delivered.wait(timeout=2.0)
        finally:
            bus.shutdown()

        assert threads == ["EventBus-Worker"]

    def test_event_str(self):
        event = Event(EventType.POLL_COMPLETED, {"visible": 2})
        assert "POLL_COMPLETED" in str(event)
        assert event.source is None


@pytest.fixture
def deps(settings, sync_bus):
    return AppDependencies(
        settings=settings,
        sampler=MockSampler([LSOF_CURL]),
        store=MenuStateStore(),
        event_bus=sync_bus,
    )


class TestAppController:
    """Tests for AppController."""

    def test_poll_loop_wired_from_dependencies(self, deps, adapter):
        controller = AppController(deps, adapter)

        assert controller.poll_loop.sampler is deps.sampler
        assert controller.poll_loop.store is deps.store
        assert controller.poll_loop.adapter is adapter
        assert controller.poll_loop.interval == deps.settings.poll_interval

    def test_start_shows_loading_state(self, deps, adapter):
        controller = AppController(deps, adapter)
        controller.poll_loop.interval = 60

        controller.start()
        try:
            assert adapter.calls[:2] == [("title", UI.LOADING_TITLE), ("status", UI.STATUS_LOADING)]
            assert controller.running
        finally:
            controller.stop()

    def test_completed_cycle_sets_title_and_status(self, deps, adapter):
        controller = AppController(deps, adapter)

        controller.poll_loop.run_once()

        assert adapter.title == "Utilized Ports: 1"
        assert adapter.status == UI.STATUS_OK

    def test_title_counts_visible_entries_only(self, deps, adapter):
        deps.sampler.set_steps([LSOF_CURL + LSOF_NODE, LSOF_NODE])
        controller = AppController(deps, adapter)

        controller.poll_loop.run_once()
        assert adapter.title == "Utilized Ports: 2"

        controller.poll_loop.run_once()
        assert adapter.title == "Utilized Ports: 1"

    def test_failed_cycle_keeps_title_and_marks_stale(self, deps, adapter):
        deps.sampler.set_steps([LSOF_CURL, SamplerTransportError("lsof timed out")])
        controller = AppController(deps, adapter)

        controller.poll_loop.run_once()
        controller.poll_loop.run_once()

        assert adapter.title == "Utilized Ports: 1"
        assert adapter.status == UI.STATUS_STALE

    def test_handle_click(self, deps, adapter):
        entry = MenuEntry(id="IPv4|8080|123", title="8080 -- curl", tooltip="PID: 123")
        deps.store.upsert(entry)
        controller = AppController(deps, adapter)

        assert controller.handle_click(entry.id) is True
        assert controller.handle_click(entry.id) is False
        assert entry.click_signal.wait(timeout=0.1)
        assert not entry.click_signal.pending()

    def test_handle_click_unknown_entry(self, deps, adapter):
        controller = AppController(deps, adapter)
        assert controller.handle_click("IPv4|1|1") is False

    def test_stop_is_idempotent(self, deps, adapter):
        controller = AppController(deps, adapter)
        controller.poll_loop.interval = 60

        controller.start()
        controller.stop()
        controller.stop()

        assert not controller.running
        assert not controller.poll_loop.running

    def test_title_for(self):
        assert AppController.title_for(0) == "Utilized Ports: 0"
        assert AppController.title_for(12) == "Utilized Ports: 12"

    def test_default_adapter(self, deps):
        controller = AppController(deps)
        assert controller.poll_loop.run_once().success


class TestCreateDependencies:
    """Tests for create_dependencies."""

    def test_defaults_with_temp_dir(self, temp_data_dir):
        deps = create_dependencies(data_dir=temp_data_dir)
        try:
            assert deps.settings == MonitorSettings()
            assert isinstance(deps.sampler, LsofSampler)
            assert len(deps.store) == 0
        finally:
            deps.event_bus.shutdown()

    def test_settings_file_selects_sampler(self, temp_data_dir):
        (temp_data_dir / STORAGE.SETTINGS_FILE).write_text('{"sampler": "psutil"}')
        deps = create_dependencies(data_dir=temp_data_dir, event_bus=EventBus(async_mode=False))

        assert isinstance(deps.sampler, PsutilSampler)
        deps.sampler.close()

    def test_explicit_settings_and_bus(self, sync_bus):
        settings = MonitorSettings(poll_interval=30, sampler_timeout=3)
        deps = create_dependencies(settings=settings, event_bus=sync_bus)

        assert deps.settings is settings
        assert deps.event_bus is sync_bus
        assert deps.sampler.timeout == 3

    def test_close_releases_sampler_and_bus(self):
        sampler = MagicMock()
        bus = MagicMock()
        deps = AppDependencies(
            settings=MonitorSettings(), sampler=sampler, store=MenuStateStore(), event_bus=bus
        )

        deps.close()

        sampler.close.assert_called_once_with()
        bus.shutdown.assert_called_once_with()

    def test_closed_psutil_sampler_reports_transport_error(self, sync_bus):
        deps = create_dependencies(settings=MonitorSettings(sampler="psutil"), event_bus=sync_bus)
        deps.close()

        with pytest.raises(SamplerTransportError, match="closed"):
            deps.sampler.sample()
