# tests/conftest.py

from __future__ import annotations

import itertools
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from taskreward.referral.service import ReferralService
from taskreward.storage.db import Database
from taskreward.storage.models import User
from taskreward.storage.repo import CompletionRepository, TaskRepository, UserRepository
from taskreward.tasks.catalog import TaskCatalog
from taskreward.tasks.settlement import SettlementService


@pytest.fixture()
def database(tmp_path: Path) -> Iterator[Database]:
    """
    Real SQLite database per test.

    SQLite does not enforce foreign keys unless asked to, which lets tests
    create users whose refer_from points at a missing row.
    """
    database = Database(f"sqlite:///{tmp_path / 'rewards.sqlite3'}")
    database.create_tables()
    yield database
    database.dispose()


@pytest.fixture()
def users() -> UserRepository:
    return UserRepository()


@pytest.fixture()
def tasks() -> TaskRepository:
    return TaskRepository()


@pytest.fixture()
def completions() -> CompletionRepository:
    return CompletionRepository()


@pytest.fixture()
def referrals(database: Database, users: UserRepository) -> ReferralService:
    return ReferralService(database, users)


@pytest.fixture()
def catalog(database: Database, tasks: TaskRepository) -> TaskCatalog:
    return TaskCatalog(database, tasks)


@pytest.fixture()
def settlement(
    database: Database,
    users: UserRepository,
    tasks: TaskRepository,
    completions: CompletionRepository,
    referrals: ReferralService,
) -> SettlementService:
    return SettlementService(
        database,
        users=users,
        tasks=tasks,
        completions=completions,
        referrals=referrals,
    )


@pytest.fixture()
def make_user(database: Database, users: UserRepository) -> Callable[..., int]:
    """Insert a user directly and return its id."""
    counter = itertools.count(1)

    def _make(balance: int = 0, refer_from: int | None = None, refer_code: str | None = None) -> int:
        n = next(counter)
        with database.session() as session:
            user = users.create(
                session,
                username=f"user{n}",
                password_hash="not-a-real-hash",
                email=None,
                refer_code=refer_code or f"CODE{n:011d}",
            )
            user.balance = balance
            user.refer_from = refer_from
            session.flush()
            return user.id

    return _make


@pytest.fixture()
def make_task(catalog: TaskCatalog) -> Callable[..., int]:
    counter = itertools.count(1)

    def _make(price: int = 50, title: str | None = None, description: str = "") -> int:
        return catalog.create_task(title or f"task {next(counter)}", description, price)

    return _make


@pytest.fixture()
def balance_of(database: Database) -> Callable[[int], int]:
    def _balance(user_id: int) -> int:
        with database.session() as session:
            return session.get(User, user_id).balance

    return _balance
