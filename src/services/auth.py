"""Authentication service for JWT and password handling."""

import logging
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.config import Settings
from src.errors import AuthenticationError, ConflictError
from src.models.user import User
from src.services.users import UserStore

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials."
INVALID_TOKEN = "Invalid or expired token"


class PasswordHasher:
    """One-way password hashing backed by bcrypt."""

    def __init__(self, rounds: int = 10):
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, password: str) -> str:
        """Hash a password."""
        return self._context.hash(password)

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against its hash."""
        return self._context.verify(plain_password, hashed_password)


class TokenService:
    """Issues and verifies signed bearer tokens carrying a user id."""

    def __init__(self, settings: Settings):
        self.secret = settings.jwt_secret
        self.algorithm = settings.jwt_algorithm
        self.expires_in = timedelta(minutes=settings.jwt_expiration_minutes)

    def issue(self, user_id: int, email: str) -> str:
        """Create a JWT access token."""
        expire = datetime.now(UTC) + self.expires_in
        to_encode = {
            "sub": str(user_id),
            "email": email,
            "exp": expire,
        }
        return jwt.encode(to_encode, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> int:
        """Decode a JWT token and return the user id it was issued for.

        Raises AuthenticationError for malformed, expired or tampered tokens.
        """
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError as e:
            logger.debug(f"Token rejected: {e}")
            raise AuthenticationError(INVALID_TOKEN) from e

        subject = payload.get("sub")
        if subject is None:
            raise AuthenticationError(INVALID_TOKEN)
        try:
            return int(subject)
        except (TypeError, ValueError) as e:
            raise AuthenticationError(INVALID_TOKEN) from e


class AuthService:
    """Registration and login on top of the credential store."""

    def __init__(self, db: Session, hasher: PasswordHasher, tokens: TokenService):
        self.db = db
        self.users = UserStore(db)
        self.hasher = hasher
        self.tokens = tokens

    def register(
        self,
        email: str,
        password: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> User:
        """Create a new user, refusing emails that are already taken."""
        if self.users.get_by_email(email):
            raise ConflictError("Email already in use.")

        try:
            user = self.users.create(email, self.hasher.hash(password), first_name, last_name)
        except IntegrityError as e:
            # Lost a race with a concurrent registration for the same email
            self.db.rollback()
            raise ConflictError("Email already in use.") from e

        logger.info(f"Registered user {user.id}")
        return user

    def login(self, email: str, password: str) -> tuple[User, str]:
        """Authenticate a user by email and password and issue a token.

        Unknown email and wrong password fail with the same message.
        """
        user = self.users.get_by_email(email)
        if not user or not self.hasher.verify(password, user.password_hash):
            raise AuthenticationError(INVALID_CREDENTIALS)

        return user, self.tokens.issue(user.id, user.email)
