from minirdbms.types import Index


def test_add_and_find():
    index = Index("id")
    index.add(1, 0)
    index.add(1, 3)
    index.add(2, 1)

    assert index.find(1) == [0, 3]
    assert index.find(2) == [1]
    assert index.find(99) == []


def test_null_is_never_indexed():
    index = Index("email")
    index.add(None, 0)
    index.remove(None, 0)

    assert len(index) == 0
    assert index.find(None) == []
    assert None not in index


def test_remove_drops_empty_entries():
    index = Index("id")
    index.add("a", 0)
    index.add("a", 1)

    index.remove("a", 0)
    assert index.find("a") == [1]

    index.remove("a", 1)
    assert "a" not in index
    assert len(index) == 0

    # removing something absent is a no-op
    index.remove("a", 1)
    index.remove("zzz", 5)


def test_keys_are_typed():
    index = Index("v")
    index.add(True, 0)
    index.add(1, 1)
    index.add("1", 2)

    assert index.find(True) == [0]
    assert index.find(1) == [1]
    assert index.find(1.0) == [1]
    assert index.find("1") == [2]


def test_find_returns_a_copy():
    index = Index("id")
    index.add(7, 0)
    index.find(7).append(42)
    assert index.find(7) == [0]


def test_clear():
    index = Index("id")
    index.add(1, 0)
    index.add(2, 1)
    index.clear()
    assert len(index) == 0
    assert index.find(1) == []
