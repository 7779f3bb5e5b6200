"""Table eligibility filter tests."""

import pytest

from tablebook.services.eligibility import TableSnapshot, filter_eligible_tables, validate_party_size
from tablebook.services.errors import InvalidPartySize


def _table(table_id: int, number: str, capacity: int, min_capacity: int = 1, **kwargs) -> TableSnapshot:
    return TableSnapshot(
        id=table_id,
        number=number,
        capacity=capacity,
        min_capacity=min_capacity,
        area_id=kwargs.pop("area_id", 1),
        area_name=kwargs.pop("area_name", "Main Hall"),
        **kwargs,
    )


CATALOG = [
    _table(1, "T1", 2),
    _table(2, "T2", 4),
    _table(3, "T3", 6, min_capacity=4),
    _table(4, "T4", 8, min_capacity=5, area_id=2, area_name="Garden Terrace"),
    _table(5, "T5", 4, is_active=False),
]


def test_only_tables_within_capacity_range_are_eligible() -> None:
    eligible = filter_eligible_tables(CATALOG, 4)
    assert [table.id for table in eligible] == [2, 3]


def test_min_capacity_excludes_small_parties_from_large_tables() -> None:
    eligible = filter_eligible_tables(CATALOG, 2)
    assert [table.id for table in eligible] == [1, 2]


def test_eligible_set_never_grows_with_party_size_when_min_capacity_is_one() -> None:
    tables = [table for table in CATALOG if table.min_capacity == 1]
    for size in range(1, 9):
        larger = {table.id for table in filter_eligible_tables(tables, size + 1)}
        smaller = {table.id for table in filter_eligible_tables(tables, size)}
        assert larger <= smaller


def test_smaller_party_keeps_tables_unless_below_their_minimum() -> None:
    for size in range(1, 9):
        smaller = {table.id for table in filter_eligible_tables(CATALOG, size)}
        for table in filter_eligible_tables(CATALOG, size + 1):
            assert table.id in smaller or table.min_capacity > size


def test_party_larger_than_any_table_has_no_candidates() -> None:
    assert filter_eligible_tables(CATALOG, 9) == []


def test_results_are_sorted_smallest_table_first() -> None:
    tables = [_table(7, "B", 6), _table(8, "A", 6), _table(9, "C", 4)]
    assert [table.id for table in filter_eligible_tables(tables, 4)] == [9, 8, 7]


def test_area_and_zone_filters() -> None:
    assert [table.id for table in filter_eligible_tables(CATALOG, 6, area_id=2)] == [4]
    assert [table.id for table in filter_eligible_tables(CATALOG, 6, zone="garden")] == [4]
    assert filter_eligible_tables(CATALOG, 2, zone="terrace") == []


@pytest.mark.parametrize("value", [0, -1, 2.5, "4", None, True])
def test_invalid_party_size_is_rejected(value) -> None:
    with pytest.raises(InvalidPartySize):
        validate_party_size(value)
    with pytest.raises(InvalidPartySize):
        filter_eligible_tables(CATALOG, value)
