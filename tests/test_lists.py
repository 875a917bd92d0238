from nachos.lists import KeyedList


def test_new_list_is_empty():
    lst = KeyedList()
    assert lst.is_empty() is True
    assert len(lst) == 0
    assert lst.pop() is None
    assert lst.top() is None
    assert lst.sorted_pop() is None


def test_append_is_fifo():
    lst = KeyedList()
    for item in ["a", "b", "c"]:
        lst.append(item)
    assert [lst.pop(), lst.pop(), lst.pop()] == ["a", "b", "c"]
    assert lst.is_empty() is True


def test_prepend_puts_item_in_front():
    lst = KeyedList()
    lst.append("a")
    lst.prepend("b")
    assert list(lst) == ["b", "a"]
    assert lst.top() == "b"


def test_get_by_index():
    lst = KeyedList()
    lst.append("x")
    lst.append("y")
    assert lst.get(0) == "x"
    assert lst.get(1) == "y"
    assert lst.get(2) is None
    assert lst.get(-1) is None


def test_len_counts_items():
    lst = KeyedList()
    for item in range(7):
        lst.append(item)
    assert len(lst) == 7
    lst.pop()
    assert len(lst) == 6


def test_discard_removes_all_occurrences_and_keeps_order():
    a, b, c = object(), object(), object()
    lst = KeyedList()
    for item in (a, b, a, c):
        lst.append(item)
    lst.discard(a)
    assert list(lst) == [b, c]


def test_discard_missing_item_leaves_list_unchanged():
    a, b = object(), object()
    lst = KeyedList()
    lst.append(a)
    lst.discard(b)
    assert list(lst) == [a]


def test_for_each_visits_in_order():
    lst = KeyedList()
    for item in ["p", "q", "r"]:
        lst.append(item)
    seen = []
    lst.for_each(seen.append)
    assert seen == ["p", "q", "r"]


def test_sorted_insert_orders_by_key():
    lst = KeyedList()
    keys = [50, 10, 30, 20, 40]
    for key in keys:
        lst.sorted_insert(f"item{key}", key)
    popped = []
    while (entry := lst.sorted_pop()) is not None:
        popped.append(entry)
    assert [key for _, key in popped] == sorted(keys)
    assert all(item == f"item{key}" for item, key in popped)


def test_sorted_insert_is_stable_for_equal_keys():
    lst = KeyedList()
    lst.sorted_insert("first", 5)
    lst.sorted_insert("second", 5)
    lst.sorted_insert("early", 1)
    assert list(lst) == ["early", "first", "second"]


def test_sorted_pop_returns_key():
    lst = KeyedList()
    lst.sorted_insert("job", 42)
    assert lst.sorted_pop() == ("job", 42)
    assert lst.is_empty() is True


def test_appended_items_have_zero_key():
    lst = KeyedList()
    lst.append("plain")
    assert lst.sorted_pop() == ("plain", 0)


def test_top_does_not_remove():
    lst = KeyedList()
    lst.append("head")
    lst.append("tail")
    assert lst.top() == "head"
    assert len(lst) == 2