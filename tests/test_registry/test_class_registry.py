"""Tests for ClassRegistry."""

from style_capsule.registry import ClassRegistry


class Header:
    pass


class Footer:
    pass


class TestClassRegistry:
    def test_register_and_all(self):
        registry = ClassRegistry()
        registry.register(Header)
        registry.register(Footer)
        assert registry.all() == [Header, Footer]
        assert registry.count() == 2

    def test_register_is_idempotent(self):
        registry = ClassRegistry()
        registry.register(Header)
        registry.register(Header)
        assert registry.count() == 1

    def test_ignores_none(self):
        registry = ClassRegistry()
        registry.register(None)
        assert registry.count() == 0

    def test_skips_local_classes(self):
        class Local:
            pass

        registry = ClassRegistry()
        registry.register(Local)
        assert Local not in registry

    def test_contains_and_iter(self):
        registry = ClassRegistry()
        registry.register(Header)
        assert Header in registry
        assert Footer not in registry
        assert list(registry) == [Header]

    def test_unregister(self):
        registry = ClassRegistry()
        registry.register(Header)
        registry.unregister(Header)
        registry.unregister(Footer)
        assert registry.count() == 0

    def test_clear(self):
        registry = ClassRegistry()
        registry.register(Header)
        registry.clear()
        assert registry.all() == []
