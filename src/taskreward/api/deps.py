"""Service wiring for request handlers.

Each provider builds a service from only the stores it needs, on the
database attached to the running application.
"""

from fastapi import Depends, Request

from taskreward.referral.service import ReferralService
from taskreward.storage.db import Database
from taskreward.storage.repo import CompletionRepository, TaskRepository, UserRepository
from taskreward.tasks.catalog import TaskCatalog
from taskreward.tasks.settlement import SettlementService
from taskreward.users.service import UserService


def get_db(request: Request) -> Database:
    return request.app.state.db


def get_referral_service(database: Database = Depends(get_db)) -> ReferralService:
    return ReferralService(database, UserRepository())


def get_task_catalog(database: Database = Depends(get_db)) -> TaskCatalog:
    return TaskCatalog(database, TaskRepository())


def get_settlement_service(
    database: Database = Depends(get_db),
    referrals: ReferralService = Depends(get_referral_service),
) -> SettlementService:
    return SettlementService(
        database,
        users=UserRepository(),
        tasks=TaskRepository(),
        completions=CompletionRepository(),
        referrals=referrals,
    )


def get_user_service(database: Database = Depends(get_db)) -> UserService:
    return UserService(database, UserRepository(), CompletionRepository())
