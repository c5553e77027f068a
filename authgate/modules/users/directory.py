"""
User directory for authgate.

The directory is the source of truth for user records. Only the credential
validator ever sees a record's password; everything else works with the
redacted UserIdentity view.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserIdentity:
    """Redacted, password-free view of a user."""
    id: int
    username: str


@dataclass(frozen=True)
class UserRecord:
    """Stored user record. The password never leaves the credential validator."""
    id: int
    username: str
    password: str = field(repr=False)

    @property
    def identity(self) -> UserIdentity:
        """Project the record onto its public identity."""
        return UserIdentity(id=self.id, username=self.username)


class UserDirectory(Protocol):
    """Protocol for user stores - allows swappable implementations."""

    async def find(self, username: str) -> Optional[UserRecord]:
        """
        Find a user by name.

        Returns:
            The matching record, or None if the name is unknown
        """
        ...

    async def list_all(self) -> List[UserIdentity]:
        """List every user with passwords stripped."""
        ...


class InMemoryUserDirectory:
    """
    User directory backed by a dict.

    Records are fixed at construction time so concurrent lookups never
    observe a partially built directory.
    """

    def __init__(self, records: Iterable[UserRecord]):
        self._users: Dict[str, UserRecord] = {}
        for record in records:
            if record.username in self._users:
                raise ValueError(f"Duplicate username: {record.username}")
            self._users[record.username] = record

    @classmethod
    def from_credentials(cls, users: Iterable[Tuple[str, str]]) -> "InMemoryUserDirectory":
        """
        Build a directory from (username, password) pairs.

        Ids are assigned in order starting at 1.
        """
        records = [
            UserRecord(id=index, username=username, password=password)
            for index, (username, password) in enumerate(users, start=1)
        ]
        logger.info(f"Loaded {len(records)} users into in-memory directory")
        return cls(records)

    async def find(self, username: str) -> Optional[UserRecord]:
        return self._users.get(username)

    async def list_all(self) -> List[UserIdentity]:
        return [record.identity for record in self._users.values()]

    def __len__(self) -> int:
        return len(self._users)
