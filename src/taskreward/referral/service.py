"""Referral service for refer codes and referrer links."""

import secrets
import string

from sqlalchemy.orm import Session

from taskreward.errors import ConflictError, InternalError, NotFoundError
from taskreward.logging_config import get_logger
from taskreward.settings import settings
from taskreward.storage.db import Database
from taskreward.storage.models import User
from taskreward.storage.ports import UserStore

logger = get_logger(__name__)

REFER_CODE_ALPHABET = string.ascii_letters
MAX_CODE_ATTEMPTS = 10


def _generate_code(length: int) -> str:
    """Generate a random refer code of ASCII letters."""
    return "".join(secrets.choice(REFER_CODE_ALPHABET) for _ in range(length))


class ReferralService:
    """Resolves and links referrers.

    Referrer lookup is independent of the settlement transaction: it only
    reads ``User.refer_from`` and never checks that the referrer still
    exists.
    """

    def __init__(self, database: Database, users: UserStore, code_length: int | None = None):
        self.db = database
        self.users = users
        self.code_length = code_length or settings.refer_code_length
        self.logger = get_logger(__name__)

    def resolve_referrer(self, user: User) -> int | None:
        """Return the id of the user who referred ``user``, if any."""
        return user.refer_from

    def generate_refer_code(self, session: Session) -> str:
        """Generate a refer code nobody owns yet.

        Raises:
            InternalError: If no free code was found after several attempts
        """
        for _ in range(MAX_CODE_ATTEMPTS):
            code = _generate_code(self.code_length)
            if self.users.get_by_refer_code(session, code) is None:
                return code
        raise InternalError("could not generate a unique refer code")

    def link_referrer(self, user_id: int, refer_code: str) -> int:
        """Link a user to the owner of ``refer_code``.

        Referral attribution is immutable: a user that already has a
        referrer cannot be relinked, and nobody can refer themselves.

        Args:
            user_id: User presenting the code
            refer_code: Code of the referring user

        Returns:
            Referrer's user ID

        Raises:
            NotFoundError: If the user or the code owner does not exist
            ConflictError: If the user already has a referrer or used their own code
        """
        with self.db.session() as session:
            return self.link_in_session(session, user_id, refer_code)

    def link_in_session(self, session: Session, user_id: int, refer_code: str) -> int:
        """Same as ``link_referrer`` inside an existing unit of work."""
        code = refer_code.strip()

        user = self.users.get(session, user_id)
        if user is None:
            raise NotFoundError("user", f"user with id {user_id} not found")

        referrer = self.users.get_by_refer_code(session, code) if code else None
        if referrer is None:
            self.logger.info("refer_code_unknown", user_id=user_id, refer_code=code)
            raise NotFoundError("refer_code", "refer code not found")

        if referrer.id == user.id:
            raise ConflictError("users cannot refer themselves")

        if user.refer_from is not None:
            raise ConflictError("referrer already set")

        self.users.set_refer_from(session, user_id, referrer.id)

        self.logger.info("referrer_linked", user_id=user_id, referrer_id=referrer.id)
        return referrer.id
