"""
authgate - Username/Password Login with Signed Tokens

Authenticates users by username and password, issues signed tokens
and verifies them on protected operations.

Architecture:
- Each module is self-contained with clear interfaces
- Modules are completely replaceable
- All communication through defined interfaces

Modules:
- users: User directory (lookup by name, redacted listing)
- auth: Credential validation, token issuance/verification, strategy routing
- middleware: Request gating for FastAPI applications
- api: Request/response models
"""

__version__ = "1.0.0"
