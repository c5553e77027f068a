"""
Authentication strategies.

Each strategy handles one credential scheme and exposes the same
``authenticate(request)`` capability. Failures propagate as AuthError
subclasses; turning them into a response is the router's job.
"""

from ..users import UserIdentity
from .credentials import CredentialValidator
from .errors import CredentialInvalid, TokenMalformed
from .interfaces import AuthRequest, StrategyKind, TokenValidator


class PasswordStrategy:
    """Authenticates a username/password pair against the user directory."""

    kind = StrategyKind.PASSWORD

    def __init__(self, credential_validator: CredentialValidator):
        self.validator = credential_validator

    async def authenticate(self, request: AuthRequest) -> UserIdentity:
        if request.username is None or request.password is None:
            raise CredentialInvalid()
        return await self.validator.validate(request.username, request.password)


class TokenStrategy:
    """Authenticates a request by the signed token it carries."""

    kind = StrategyKind.TOKEN

    def __init__(self, token_validator: TokenValidator):
        self.validator = token_validator

    async def authenticate(self, request: AuthRequest) -> UserIdentity:
        if not request.token:
            raise TokenMalformed("No token provided")
        return self.validator.verify(request.token)
