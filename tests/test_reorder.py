import itertools

import pytest

from consent_form_service.ordering import adjacent_index, normalize_order, reorder
from consent_form_service.schemas import FormField


def _fields(n):
    return [FormField(id=f"f{i}", name=f"n{i}", order=i * 10) for i in range(n)]


def test_reorder_is_a_permutation_with_dense_order():
    items = _fields(4)
    for src, dst in itertools.product(range(4), range(4)):
        out = reorder(items, src, dst)
        assert sorted(f.id for f in out) == sorted(f.id for f in items)
        assert [f.order for f in out] == [0, 1, 2, 3]
        assert out[dst].id == items[src].id


def test_reorder_leaves_input_untouched():
    items = _fields(3)
    reorder(items, 0, 2)
    assert [f.id for f in items] == ["f0", "f1", "f2"]
    assert [f.order for f in items] == [0, 10, 20]


def test_reorder_rejects_out_of_range():
    with pytest.raises(IndexError):
        reorder(_fields(2), 0, 2)
    with pytest.raises(IndexError):
        reorder(_fields(2), -1, 0)


def test_normalize_order_uses_list_position():
    out = normalize_order(list(reversed(_fields(3))))
    assert [(f.id, f.order) for f in out] == [("f2", 0), ("f1", 1), ("f0", 2)]


def test_adjacent_index_clamps_at_boundaries():
    assert adjacent_index(0, "up", 3) == 0
    assert adjacent_index(2, "down", 3) == 2
    assert adjacent_index(1, "up", 3) == 0
    assert adjacent_index(1, "down", 3) == 2
    with pytest.raises(ValueError):
        adjacent_index(1, "sideways", 3)
