"""Unit tests for IdentityMap."""

import gc

from transformable.core.identity import IdentityMap


class Entity:
    pass


class SlottedEntity:
    __slots__ = ("value",)

    def __init__(self):
        self.value = None


class UnhashableEntity:
    __hash__ = None

    def __eq__(self, other):
        return True


class TestIdentityMap:
    """Tests for handle issuing and release."""

    def test_same_object_same_handle(self):
        identities = IdentityMap()
        obj = Entity()

        assert identities.handle_for(obj) == identities.handle_for(obj)

    def test_distinct_objects_distinct_handles(self):
        identities = IdentityMap()
        first, second = Entity(), Entity()
        assert identities.handle_for(first) != identities.handle_for(second)

    def test_equal_objects_are_not_confused(self):
        identities = IdentityMap()
        first, second = UnhashableEntity(), UnhashableEntity()

        assert first == second
        assert identities.handle_for(first) != identities.handle_for(second)

    def test_peek_does_not_issue(self):
        identities = IdentityMap()
        obj = Entity()

        assert identities.peek(obj) is None
        handle = identities.handle_for(obj)
        assert identities.peek(obj) == handle
        assert len(identities) == 1

    def test_release_fires_callback(self):
        released = []
        identities = IdentityMap(on_release=released.append)
        obj = Entity()
        handle = identities.handle_for(obj)

        assert identities.release(obj) == handle
        assert released == [handle]
        assert identities.peek(obj) is None

    def test_release_untracked_object(self):
        released = []
        identities = IdentityMap(on_release=released.append)

        assert identities.release(Entity()) is None
        assert released == []

    def test_new_handle_after_release(self):
        identities = IdentityMap()
        obj = Entity()
        first = identities.handle_for(obj)
        identities.release(obj)

        assert identities.handle_for(obj) != first

    def test_garbage_collection_releases_handle(self):
        released = []
        identities = IdentityMap(on_release=released.append)
        obj = Entity()
        handle = identities.handle_for(obj)

        del obj
        gc.collect()

        assert released == [handle]
        assert len(identities) == 0

    def test_objects_without_weakref_support_are_held(self):
        released = []
        identities = IdentityMap(on_release=released.append)
        obj = SlottedEntity()
        handle = identities.handle_for(obj)

        assert identities.handle_for(obj) == handle
        assert identities.release(obj) == handle
        assert released == [handle]

    def test_clear_does_not_fire_callbacks(self):
        released = []
        identities = IdentityMap(on_release=released.append)
        obj = Entity()
        identities.handle_for(obj)

        identities.clear()
        del obj
        gc.collect()

        assert released == []
        assert len(identities) == 0

    def test_added_callbacks_fire_in_order(self):
        calls = []
        identities = IdentityMap(on_release=lambda h: calls.append(("first", h)))
        identities.add_release_callback(lambda h: calls.append(("second", h)))
        obj = Entity()
        handle = identities.handle_for(obj)

        identities.release(obj)

        assert calls == [("first", handle), ("second", handle)]

    def test_same_callback_is_added_once(self):
        released = []
        identities = IdentityMap()
        identities.add_release_callback(released.append)
        identities.add_release_callback(released.append)
        obj = Entity()
        identities.handle_for(obj)

        identities.release(obj)

        assert len(released) == 1
