import hashlib
import hmac
import logging
import re
import secrets
import time
import uuid
from typing import Callable, Optional

from features.users.models.user_types import AuthCredentials, AuthResult, UserProfile
from repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"[A-Z0-9a-z._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,64}")
MIN_PASSWORD_LENGTH = 6
HASH_ITERATIONS = 120_000

def validate_credentials(credentials: AuthCredentials) -> Optional[str]:
    """Return a user-facing error for malformed credentials, or None."""
    if not EMAIL_PATTERN.fullmatch(credentials.email.strip()):
        return "Invalid email address"
    if len(credentials.password) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    return None

def hash_password(password: str, salt: str) -> str:
    return hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), salt.encode("utf-8"), HASH_ITERATIONS
    ).hex()

class AuthService:
    """Local account store issuing bearer tokens.

    Failures are reported in ``AuthResult.error`` rather than raised so the
    caller can show them directly.
    """

    def __init__(self, repository: UserRepository, clock: Callable[[], float] = time.time):
        self.repository = repository
        self.clock = clock

    def create_account(self, credentials: AuthCredentials, name: Optional[str] = None) -> AuthResult:
        error = validate_credentials(credentials)
        if error:
            return AuthResult(success=False, error=error)

        email = self._normalize(credentials.email)
        if self.repository.email_exists(email):
            return AuthResult(success=False, error="Email already in use")

        user_id = str(uuid.uuid4())
        salt = secrets.token_hex(16)
        self.repository.create_user(
            user_id,
            created_at=self.clock(),
            email=email,
            name=name,
            password_hash=hash_password(credentials.password, salt),
            password_salt=salt,
            is_anonymous=False
        )
        logger.info(f"Created account {user_id}")
        return AuthResult(success=True, user_id=user_id, token=self._issue_token(user_id))

    def sign_in(self, credentials: AuthCredentials) -> AuthResult:
        error = validate_credentials(credentials)
        if error:
            return AuthResult(success=False, error=error)

        record = self.repository.get_user_record_by_email(self._normalize(credentials.email))
        if record is None or not record.password_hash or not hmac.compare_digest(
            record.password_hash, hash_password(credentials.password, record.password_salt)
        ):
            logger.info("Rejected sign-in with invalid credentials")
            return AuthResult(success=False, error="Invalid email or password")

        return AuthResult(success=True, user_id=record.user_id, token=self._issue_token(record.user_id))

    def sign_out(self, token: str) -> bool:
        return self.repository.revoke_token(token)

    def sign_in_anonymously(self) -> AuthResult:
        user_id = str(uuid.uuid4())
        self.repository.create_user(user_id, created_at=self.clock(), is_anonymous=True)
        logger.info(f"Created anonymous user {user_id}")
        return AuthResult(success=True, user_id=user_id, token=self._issue_token(user_id))

    def convert_anonymous_account(
        self,
        token: str,
        credentials: AuthCredentials,
        name: Optional[str] = None
    ) -> AuthResult:
        """Attach credentials to the anonymous user behind ``token``.

        The old token is revoked and a new one issued.
        """
        error = validate_credentials(credentials)
        if error:
            return AuthResult(success=False, error=error)

        user_id = self.repository.get_user_id_for_token(token)
        record = self.repository.get_user_record(user_id) if user_id else None
        if record is None:
            return AuthResult(success=False, error="No anonymous user to convert")
        if not record.is_anonymous:
            return AuthResult(success=False, error="Current user is not anonymous")

        email = self._normalize(credentials.email)
        if self.repository.email_exists(email):
            return AuthResult(success=False, error="Email already in use")

        salt = secrets.token_hex(16)
        self.repository.upgrade_anonymous(
            user_id, email, hash_password(credentials.password, salt), salt, name
        )
        self.repository.revoke_token(token)
        logger.info(f"Converted anonymous user {user_id}")
        return AuthResult(success=True, user_id=user_id, token=self._issue_token(user_id))

    def get_current_user(self, token: str) -> Optional[UserProfile]:
        user_id = self.repository.get_user_id_for_token(token)
        if user_id is None:
            return None
        return self.repository.get_profile(user_id)

    def get_user_id(self, token: str) -> Optional[str]:
        return self.repository.get_user_id_for_token(token)

    def _issue_token(self, user_id: str) -> str:
        token = uuid.uuid4().hex
        self.repository.add_token(token, user_id, self.clock())
        return token

    @staticmethod
    def _normalize(email: str) -> str:
        return email.strip().lower()
