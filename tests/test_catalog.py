# tests/test_catalog.py

from __future__ import annotations

import pytest

from taskreward.errors import ConflictError, ValidationError


def test_created_task_is_listed(catalog) -> None:
    task_id = catalog.create_task("T", "D", 20)

    listed = catalog.list_tasks()

    assert [(t.id, t.title, t.description, t.price) for t in listed] == [(task_id, "T", "D", 20)]


def test_task_ids_are_fresh(catalog) -> None:
    first = catalog.create_task("first", "", 5)
    second = catalog.create_task("second", "", 5)

    assert first != second
    assert [t.id for t in catalog.list_tasks()] == [first, second]


def test_empty_catalog(catalog) -> None:
    assert catalog.list_tasks() == []


@pytest.mark.parametrize(
    ("title", "price"),
    [
        ("", 20),
        ("   ", 20),
        ("T", 0),
        ("T", -3),
        ("T", True),
    ],
)
def test_invalid_tasks_are_rejected(catalog, title, price) -> None:
    with pytest.raises(ValidationError):
        catalog.create_task(title, "D", price)

    assert catalog.list_tasks() == []


def test_duplicate_title_and_description_conflicts(catalog) -> None:
    catalog.create_task("T", "D", 20)

    with pytest.raises(ConflictError):
        catalog.create_task("T", "D", 99)

    assert len(catalog.list_tasks()) == 1


def test_same_title_with_other_description_is_allowed(catalog) -> None:
    catalog.create_task("T", "D", 20)
    catalog.create_task("T", "other", 20)

    assert len(catalog.list_tasks()) == 2


def test_missing_description_defaults_to_empty(catalog) -> None:
    catalog.create_task("T", None, 1)

    assert catalog.list_tasks()[0].description == ""
