import pytest

from ivview.slotlist import LinkedSlotList, StableKey


@pytest.fixture
def abc():
    lst = LinkedSlotList()
    keys = lst.extend(["a", "b", "c"])
    return lst, keys


def test_empty_list():
    lst = LinkedSlotList()
    assert len(lst) == 0
    assert not lst
    assert lst.head() is None
    assert lst.tail() is None
    assert list(lst.values()) == []


def test_order_and_ends(abc):
    lst, (a, b, c) = abc
    assert list(lst.values()) == ["a", "b", "c"]
    assert lst.head() == a
    assert lst.tail() == c
    assert lst.prev(a) is None
    assert lst.next(c) is None


def test_next_and_prev_are_inverse(abc):
    lst, keys = abc
    for key in keys:
        n = lst.next(key)
        if n is not None:
            assert lst.prev(n) == key
        p = lst.prev(key)
        if p is not None:
            assert lst.next(p) == key


def test_remove_middle_relinks_neighbours(abc):
    lst, (a, b, c) = abc
    assert lst.remove(b) == "b"
    assert lst.next(a) == c
    assert lst.prev(c) == a
    assert len(lst) == 2
    assert list(lst) == [a, c]


def test_remove_ends(abc):
    lst, (a, b, c) = abc
    lst.remove(a)
    assert lst.head() == b
    lst.remove(c)
    assert lst.tail() == b
    assert lst.head() == b
    lst.remove(b)
    assert lst.head() is None and lst.tail() is None
    assert not lst


def test_stale_key_is_not_found(abc):
    lst, (a, b, c) = abc
    lst.remove(b)
    assert b not in lst
    assert lst.get(b) is None
    assert lst.next(b) is None
    assert lst.prev(b) is None
    assert lst.position(b) is None
    assert lst.remove(b) is None
    assert len(lst) == 2


def test_recycled_slot_gets_new_generation(abc):
    lst, (a, b, c) = abc
    lst.remove(b)
    d = lst.push_back("d")
    assert d.slot == b.slot
    assert d != b
    assert lst.get(b) is None
    assert lst.get(d) == "d"
    assert list(lst.values()) == ["a", "c", "d"]


def test_unrelated_removal_keeps_keys_valid(abc):
    lst, (a, b, c) = abc
    lst.remove(a)
    assert lst.get(c) == "c"
    assert lst.prev(c) == b


def test_position_counts_from_head(abc):
    lst, (a, b, c) = abc
    assert [lst.position(k) for k in (a, b, c)] == [1, 2, 3]
    lst.remove(a)
    assert lst.position(c) == 2


def test_foreign_keys_are_ignored(abc):
    lst, _ = abc
    assert lst.get(StableKey(99, 0)) is None
    assert StableKey(-1, 0) not in lst
    assert "a" not in lst
    assert lst.get(None) is None


def test_items(abc):
    lst, keys = abc
    assert list(lst.items()) == list(zip(keys, "abc"))
