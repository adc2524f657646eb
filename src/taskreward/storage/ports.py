"""Store capabilities the services depend on.

Services take these Protocols instead of the concrete repositories so tests
can inject failing or instrumented stores. Every method receives the
``Session`` of the caller's unit of work; a store never opens or commits a
transaction itself.
"""

from typing import Protocol, Sequence

from sqlalchemy.orm import Session

from taskreward.storage.models import Task, TaskCompletion, User


class UserStore(Protocol):
    def get(self, session: Session, user_id: int) -> User | None: ...

    def get_by_username(self, session: Session, username: str) -> User | None: ...

    def get_by_email(self, session: Session, email: str) -> User | None: ...

    def get_by_refer_code(self, session: Session, refer_code: str) -> User | None: ...

    def create(
        self,
        session: Session,
        *,
        username: str,
        password_hash: str,
        email: str | None,
        refer_code: str,
    ) -> User: ...

    def adjust_balance(self, session: Session, user_id: int, delta: int) -> None: ...

    def set_refer_from(self, session: Session, user_id: int, referrer_id: int) -> None: ...

    def leaderboard(self, session: Session, limit: int) -> Sequence[User]: ...


class TaskStore(Protocol):
    def get(self, session: Session, task_id: int) -> Task | None: ...

    def create(self, session: Session, *, title: str, description: str, price: int) -> Task: ...

    def find_duplicate(self, session: Session, title: str, description: str) -> Task | None: ...

    def list_all(self, session: Session) -> Sequence[Task]: ...


class CompletionStore(Protocol):
    def exists(self, session: Session, user_id: int, task_id: int) -> bool: ...

    def record(self, session: Session, user_id: int, task_id: int) -> TaskCompletion: ...

    def count_for_user(self, session: Session, user_id: int) -> int: ...
