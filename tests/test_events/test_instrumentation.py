"""Tests for the event bus and CSS processing instrumentation."""

from style_capsule.css import scope_selectors, scope_with_nesting
from style_capsule.events import CssScoped, EventBus, StylesheetRegistered
from style_capsule.instrumentation import bus, component_name, notify


class _Widget:
    pass


# ---------------------------------------------------------------------------
# EventBus
# ---------------------------------------------------------------------------


class TestEventBus:
    def test_subscribe_receives_matching_events(self):
        events = []
        b = EventBus()
        b.subscribe(CssScoped, events.append)
        event = CssScoped("nesting", "X", "abc", 1, 2, 0.0)
        b.emit(event)
        b.emit(StylesheetRegistered(namespace="default", cache_strategy="none"))
        assert events == [event]

    def test_on_all_receives_everything(self):
        events = []
        b = EventBus()
        b.on_all(events.append)
        b.emit(CssScoped("nesting", "X", "abc", 1, 2, 0.0))
        b.emit(StylesheetRegistered(namespace="default", cache_strategy="none"))
        assert len(events) == 2

    def test_unsubscribe(self):
        events = []
        b = EventBus()
        b.subscribe(CssScoped, events.append)
        b.unsubscribe(events.append, CssScoped)
        b.emit(CssScoped("nesting", "X", "abc", 1, 2, 0.0))
        assert events == []
        assert not b.has_listeners(CssScoped)

    def test_has_listeners(self):
        b = EventBus()
        assert not b.has_listeners(CssScoped)
        b.on_all(lambda e: None)
        assert b.has_listeners(CssScoped)

    def test_clear(self):
        b = EventBus()
        b.subscribe(CssScoped, lambda e: None)
        b.clear()
        assert not b.has_listeners(CssScoped)


# ---------------------------------------------------------------------------
# Instrumentation
# ---------------------------------------------------------------------------


class TestInstrumentCssProcessing:
    def test_selector_patching_emits_event(self):
        events = []
        bus.subscribe(CssScoped, events.append)
        result = scope_selectors(".a { color: red; }", "abc123", component=_Widget)
        assert len(events) == 1
        event = events[0]
        assert event.strategy == "selector_patching"
        assert event.capsule_id == "abc123"
        assert event.component.endswith("_Widget")
        assert event.input_size == len(".a { color: red; }")
        assert event.output_size == len(result)
        assert event.duration >= 0

    def test_nesting_emits_event(self):
        events = []
        bus.subscribe(CssScoped, events.append)
        scope_with_nesting(".a { color: red; }", "abc123")
        assert events[0].strategy == "nesting"
        assert events[0].component == "Unknown"

    def test_no_event_for_empty_input(self):
        events = []
        bus.subscribe(CssScoped, events.append)
        scope_selectors("  ", "abc123")
        assert events == []

    def test_notify_without_listeners_is_silent(self):
        notify(StylesheetRegistered(namespace="default", cache_strategy="none"))


class TestComponentName:
    def test_none(self):
        assert component_name(None) == "Unknown"

    def test_string(self):
        assert component_name("Card") == "Card"

    def test_class(self):
        assert component_name(_Widget) == f"{__name__}._Widget"

    def test_instance(self):
        assert component_name(_Widget()) == f"{__name__}._Widget"
