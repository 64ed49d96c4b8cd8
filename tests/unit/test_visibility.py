"""Unit tests for public/private method markers."""

import pytest

from servios.visibility import (
    VisibilityRegistry,
    is_public,
    list_public_methods,
    private,
    public,
    visibility_registry,
)


@public
class OpenService:
    def __init__(self):
        self.calls = 0

    def list_items(self):
        return []

    async def fetch(self, item_id):
        return item_id

    @private
    def purge(self):
        pass

    @staticmethod
    def version():
        return "1"

    def __repr__(self):
        return "OpenService()"


class MixedService:
    @public
    def search(self, query):
        """Search items."""
        return query

    @public()
    async def count(self):
        return 0

    def internal(self):
        pass

    @public
    @private
    def locked(self):
        pass


class ChildService(MixedService):
    def extra(self):
        pass

    @private
    def count(self):
        return 1


def test_private_wins_over_class_public():
    assert is_public(OpenService, "purge") is False


def test_class_public_covers_every_method_but_constructor():
    assert is_public(OpenService, "list_items")
    assert is_public(OpenService, "fetch")
    assert is_public(OpenService, "version")
    assert not is_public(OpenService, "__init__")


def test_method_level_public():
    assert is_public(MixedService, "search")
    assert is_public(MixedService, "count")
    assert not is_public(MixedService, "internal")
    assert not is_public(MixedService, "locked")


def test_default_not_public():
    class Plain:
        def run(self):
            pass

    assert not is_public(Plain, "run")
    assert list_public_methods(Plain) == []


def test_instances_resolve_to_their_class():
    service = OpenService()
    assert is_public(service, "fetch")
    assert not is_public(service, "purge")


def test_markers_leave_methods_callable():
    assert MixedService().search("q") == "q"
    assert OpenService.version() == "1"
    assert OpenService().calls == 0


def test_list_public_methods_class_public():
    assert list_public_methods(OpenService) == ["list_items", "fetch", "version"]


def test_list_public_methods_explicit():
    assert list_public_methods(MixedService()) == ["search", "count"]


def test_markers_inherited_and_private_overrides():
    assert is_public(ChildService, "search")
    assert not is_public(ChildService, "count")
    assert not is_public(ChildService, "extra")
    assert list_public_methods(ChildService) == ["search"]


def test_record_for_merges_mro():
    record = visibility_registry.record_for(ChildService)
    assert list(record.public) == ["search", "count", "locked"]
    assert list(record.private) == ["locked", "count"]
    assert record.class_public is False


def test_private_rejects_classes():
    with pytest.raises(TypeError):

        @private
        class Nope:
            pass


def test_separate_registry():
    registry = VisibilityRegistry()

    @public(registry=registry)
    class Isolated:
        def run(self):
            pass

    assert is_public(Isolated, "run", registry)
    assert not is_public(Isolated, "run")

    registry.clear()
    assert not is_public(Isolated, "run", registry)


def test_explicit_listing_keeps_marking_order():
    class Ordered:
        @public
        def zeta(self):
            pass

        @public
        def alpha(self):
            pass

        @public
        def mid(self):
            pass

    class MoreOrdered(Ordered):
        @public
        def beta(self):
            pass

    assert list_public_methods(Ordered) == ["zeta", "alpha", "mid"]
    assert list_public_methods(MoreOrdered) == ["zeta", "alpha", "mid", "beta"]


def test_class_public_listing_omits_private_names():
    names = list_public_methods(OpenService)
    assert "purge" not in names
    assert all(is_public(OpenService, name) for name in names)
