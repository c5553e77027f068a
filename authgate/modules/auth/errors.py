"""Authentication failure taxonomy."""


class AuthError(Exception):
    """Base class for per-request authentication failures."""

    reason = "auth_error"


class CredentialInvalid(AuthError):
    """Unknown username or wrong password. The two cases are never distinguished."""

    reason = "credential_invalid"

    def __init__(self, message: str = "Invalid username or password"):
        super().__init__(message)


class TokenError(AuthError):
    """Base class for token verification failures."""

    reason = "token_error"


class TokenMalformed(TokenError):
    """The token envelope cannot be parsed."""

    reason = "token_malformed"


class TokenSignatureInvalid(TokenError):
    """The envelope parses but its signature does not match."""

    reason = "token_signature_invalid"


class TokenClaimsMissing(TokenError):
    """The signature is valid but required claims are absent or unusable."""

    reason = "token_claims_missing"


class StrategyNotApplicable(AuthError):
    """The request does not match any configured strategy."""

    reason = "strategy_not_applicable"


class TokenExpired(TokenError):
    """The token carries an expiry claim that has passed."""

    reason = "token_expired"
