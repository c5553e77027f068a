"""
Credential validation for password logins.

Checks a username/password pair against the user directory and hands back
the redacted identity. Unknown users and wrong passwords fail the same way.
"""

import logging
import secrets

from ..users import UserDirectory, UserIdentity
from .errors import CredentialInvalid

logger = logging.getLogger(__name__)

# Compared against when the username is unknown so both failure paths do the same work
_DUMMY_PASSWORD = secrets.token_urlsafe(32)


class CredentialValidator:
    """
    Validates username/password pairs.

    Comparison is constant-time; swap `passwords_match` for a hash check when
    the directory stores hashes instead of plaintext.
    """

    def __init__(self, user_directory: UserDirectory):
        """
        Initialize credential validator.

        Args:
            user_directory: Store used to look up user records by name
        """
        self.directory = user_directory

    @staticmethod
    def passwords_match(supplied: str, stored: str) -> bool:
        """Compare a supplied password with a stored one in constant time."""
        return secrets.compare_digest(supplied.encode("utf-8"), stored.encode("utf-8"))

    async def validate(self, username: str, password: str) -> UserIdentity:
        """
        Validate a username and password.

        Args:
            username: Name to look up
            password: Password supplied by the caller

        Returns:
            UserIdentity of the matching user, without the password

        Raises:
            CredentialInvalid: If the user is unknown or the password is wrong
        """
        if not username or password is None:
            raise CredentialInvalid()

        record = await self.directory.find(username)

        if record is None:
            self.passwords_match(password, _DUMMY_PASSWORD)
            logger.debug("Credential check failed")
            raise CredentialInvalid()

        if not self.passwords_match(password, record.password):
            logger.debug("Credential check failed")
            raise CredentialInvalid()

        return record.identity
