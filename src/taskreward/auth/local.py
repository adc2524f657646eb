"""Local authentication service (username/password)."""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext

from taskreward.errors import AuthenticationError, ConflictError, ValidationError
from taskreward.logging_config import get_logger
from taskreward.referral.service import ReferralService
from taskreward.settings import settings
from taskreward.storage.db import Database
from taskreward.storage.models import User
from taskreward.storage.ports import UserStore

logger = get_logger(__name__)

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# JWT settings
JWT_ALGORITHM = "HS256"


class LocalAuthService:
    """Authentication service for local (username/password) users.

    Resolves bearer tokens to user IDs for the HTTP layer. The settlement
    engine itself only ever sees the resulting trusted user ID.
    """

    def __init__(
        self,
        database: Database,
        users: UserStore,
        referrals: ReferralService,
        secret_key: str | None = None,
        expire_hours: int | None = None,
    ):
        self.db = database
        self.users = users
        self.referrals = referrals
        self.secret_key = secret_key or settings.jwt_secret_key
        self.expire_hours = expire_hours or settings.jwt_expire_hours
        self.logger = get_logger(__name__)

    # ==================== PASSWORD ====================

    def _truncate_password(self, password: str) -> str:
        """Truncate password to 72 bytes (bcrypt limit)."""
        return password.encode("utf-8")[:72].decode("utf-8", errors="ignore")

    def hash_password(self, password: str) -> str:
        """Hash a password."""
        return pwd_context.hash(self._truncate_password(password))

    def verify_password(self, password: str, hashed: str) -> bool:
        """Verify a password against hash."""
        return pwd_context.verify(self._truncate_password(password), hashed)

    # ==================== USER MANAGEMENT ====================

    def register(
        self,
        username: str,
        password: str,
        email: str | None = None,
        refer_code: str | None = None,
    ) -> User:
        """Register a new user.

        Every user gets their own refer code. When ``refer_code`` is given
        the new user is linked to its owner in the same transaction.

        Args:
            username: Unique username
            password: Plain password
            email: Optional unique email
            refer_code: Optional refer code of the referring user

        Returns:
            Created user

        Raises:
            ValidationError: If username or password is empty
            ConflictError: If username or email is already registered
            NotFoundError: If ``refer_code`` belongs to nobody
        """
        username = (username or "").strip()
        if not username:
            raise ValidationError("username is required")
        if not password:
            raise ValidationError("password is required")
        email = email.lower().strip() if email else None

        with self.db.session() as session:
            if self.users.get_by_username(session, username) is not None:
                raise ConflictError("user already exists")
            if email and self.users.get_by_email(session, email) is not None:
                raise ConflictError("user already exists")

            user = self.users.create(
                session,
                username=username,
                password_hash=self.hash_password(password),
                email=email,
                refer_code=self.referrals.generate_refer_code(session),
            )
            if refer_code:
                user.refer_from = self.referrals.link_in_session(session, user.id, refer_code)

        self.logger.info("user_registered", user_id=user.id, referred=user.refer_from is not None)
        return user

    def authenticate(self, username: str, password: str) -> str:
        """Check credentials and issue an access token.

        Raises:
            AuthenticationError: If the credentials are wrong
        """
        with self.db.session() as session:
            user = self.users.get_by_username(session, (username or "").strip())

        if user is None or not self.verify_password(password or "", user.password_hash):
            self.logger.info("login_failed", username=username)
            raise AuthenticationError("invalid username or password")

        self.logger.info("user_authenticated", user_id=user.id)
        return self.create_access_token(user.id)

    # ==================== JWT ====================

    def create_access_token(self, user_id: int) -> str:
        """Create a signed access token for a user."""
        now = datetime.now(timezone.utc)
        claims = {
            "sub": str(user_id),
            "iat": now,
            "exp": now + timedelta(hours=self.expire_hours),
        }
        return jwt.encode(claims, self.secret_key, algorithm=JWT_ALGORITHM)

    def resolve_identity(self, token: str) -> int | None:
        """Resolve an access token to a user ID.

        Returns:
            User ID, or None if the token is invalid or expired
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[JWT_ALGORITHM])
            return int(payload["sub"])
        except (JWTError, KeyError, ValueError):
            self.logger.debug("token_rejected")
            return None
