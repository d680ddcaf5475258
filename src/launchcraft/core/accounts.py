"""Registration of user accounts."""

import json
import threading
from pathlib import Path
from typing import Optional, Protocol

from django.contrib.auth.hashers import make_password

from launchcraft.core.errors import DuplicateEmailError
from launchcraft.core.logging import get_logger
from launchcraft.core.store import write_json_atomic
from launchcraft.schemas.account import User

logger = get_logger("launchcraft.accounts")

# Every repository over the same file shares one lock, however many instances exist
_file_locks: dict[Path, threading.RLock] = {}
_file_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    key = path.resolve()
    with _file_locks_guard:
        if key not in _file_locks:
            _file_locks[key] = threading.RLock()
        return _file_locks[key]


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserRepository(Protocol):
    """User storage. `lock` serializes a lookup with the insert that follows it."""

    lock: threading.RLock

    def get_by_email(self, email: str) -> Optional[User]: ...

    def add(self, user: User) -> None: ...


class InMemoryUserRepository:
    def __init__(self):
        self._users: dict[str, User] = {}
        self.lock = threading.RLock()

    def get_by_email(self, email: str) -> Optional[User]:
        return self._users.get(normalize_email(email))

    def add(self, user: User) -> None:
        with self.lock:
            self._users[normalize_email(user.email)] = user

    def __len__(self) -> int:
        return len(self._users)


class FileUserRepository:
    """Users kept in a single JSON file, keyed by normalized email."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.lock = _lock_for(self.path)

    def _read(self) -> dict[str, dict]:
        if not self.path.exists():
            return {}
        return json.loads(self.path.read_text(encoding="utf-8"))

    def get_by_email(self, email: str) -> Optional[User]:
        data = self._read().get(normalize_email(email))
        return User.model_validate(data) if data else None

    def add(self, user: User) -> None:
        with self.lock:
            users = self._read()
            users[normalize_email(user.email)] = user.model_dump(mode="json", by_alias=True)
            write_json_atomic(self.path, users)


class AccountService:
    """
    Creates accounts with salted one-way password hashes.

    Input shape (name length, email syntax, password length) is checked at the
    HTTP boundary; this service only enforces email uniqueness.
    """

    def __init__(self, repository: UserRepository):
        self.repository = repository

    def register(self, name: str, email: str, password: str) -> User:
        """
        Register a new user.

        Args:
            name: Display name
            email: Email address, compared case-insensitively
            password: Plaintext password; only its hash is kept

        Returns:
            The created User

        Raises:
            DuplicateEmailError: If the email already has an account
        """
        email = normalize_email(email)
        password_hash = make_password(password)

        with self.repository.lock:
            if self.repository.get_by_email(email) is not None:
                raise DuplicateEmailError(email)

            user = User(name=name.strip(), email=email, password_hash=password_hash)
            self.repository.add(user)

        logger.info("Registered user", context={"user_id": user.id})
        return user
