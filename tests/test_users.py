# tests/test_users.py

from __future__ import annotations

import pytest

from taskreward.errors import NotFoundError
from taskreward.storage.repo import CompletionRepository
from taskreward.users.service import UserService


@pytest.fixture()
def user_service(database, users, completions: CompletionRepository) -> UserService:
    return UserService(database, users, completions)


def test_leaderboard_orders_by_balance_then_id(user_service, make_user) -> None:
    low = make_user(balance=5)
    tied_first = make_user(balance=30)
    top = make_user(balance=90)
    tied_second = make_user(balance=30)

    board = user_service.leaderboard()

    assert [u.id for u in board] == [top, tied_first, tied_second, low]


def test_leaderboard_respects_limit(user_service, make_user) -> None:
    for balance in (1, 2, 3, 4):
        make_user(balance=balance)

    board = user_service.leaderboard(limit=2)

    assert [u.balance for u in board] == [4, 3]


def test_user_info_counts_completions(user_service, settlement, make_user, make_task) -> None:
    user_id = make_user(balance=3)
    settlement.complete_task(user_id, make_task(price=10))
    settlement.complete_task(user_id, make_task(price=20))

    info = user_service.get_user_info(user_id)

    assert info.balance == 33
    assert info.tasks_completed == 2


def test_user_info_for_missing_user(user_service) -> None:
    with pytest.raises(NotFoundError):
        user_service.get_user_info(404)
