"""
Unit tests for the authentication service facade and its factory.
"""

import os
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from authgate.config.provider import DirectoryConfig, EnvConfigProvider, TokenConfig
from authgate.modules.auth import AuthFactory, DefaultAuthenticationService, StrategyKind
from authgate.modules.auth.interfaces import AuthResult
from authgate.modules.users import InMemoryUserDirectory, UserIdentity

SECRET = "service-test-secret-key-long-enough-for-hs256"


@pytest.fixture
def config_provider():
    """Config provider returning fixed token and directory settings."""
    provider = MagicMock()
    provider.get_token_config.return_value = TokenConfig(secret_key=SECRET)
    provider.get_directory_config.return_value = DirectoryConfig(
        users=[("admin", "admin"), ("tester", "tester")]
    )
    return provider


@pytest.fixture
def service(config_provider):
    return AuthFactory.build(config_provider)


@pytest.mark.asyncio
async def test_login_issues_token_that_verifies(service):
    login = await service.login("admin", "admin")

    assert login.ok is True
    assert login.token

    verified = await service.verify(login.token)

    assert verified.ok is True
    assert verified.identity == UserIdentity(id=1, username="admin")
    assert verified.method == StrategyKind.TOKEN


@pytest.mark.asyncio
async def test_login_failure_has_no_token(service):
    result = await service.login("admin", "wrong")

    assert result.ok is False
    assert result.token is None
    assert result.error == "incorrect username or password"


@pytest.mark.asyncio
async def test_verify_without_token(service):
    result = await service.verify(None)

    assert result.ok is False
    assert result.error == "unauthorized"


@pytest.mark.asyncio
async def test_tokens_validate_across_instances_sharing_a_key(config_provider):
    first = AuthFactory.build(config_provider)
    second = AuthFactory.build(config_provider)

    login = await first.login("tester", "tester")
    result = await second.verify(login.token)

    assert result.identity == UserIdentity(id=2, username="tester")


@pytest.mark.asyncio
async def test_tokens_do_not_validate_across_keys(config_provider):
    first = AuthFactory.build(config_provider)
    config_provider.get_token_config.return_value = TokenConfig(
        secret_key="some-other-secret-key-long-enough-for-hs256"
    )
    second = AuthFactory.build(config_provider)

    login = await first.login("tester", "tester")
    result = await second.verify(login.token)

    assert result.ok is False
    assert result.reason == "token_signature_invalid"


@pytest.mark.asyncio
async def test_build_uses_injected_directory(config_provider):
    directory = InMemoryUserDirectory.from_credentials([("carol", "pw")])

    service = AuthFactory.build(config_provider, user_directory=directory)

    assert (await service.login("carol", "pw")).identity == UserIdentity(id=1, username="carol")
    assert (await service.login("admin", "admin")).ok is False
    config_provider.get_directory_config.assert_not_called()


@pytest.mark.asyncio
async def test_build_passes_redis_to_router(config_provider):
    redis = AsyncMock()

    service = AuthFactory.build(config_provider, redis_client=redis)
    await service.login("admin", "admin")

    redis.lpush.assert_called_once()


@pytest.mark.asyncio
async def test_service_delegates_to_router():
    router = MagicMock()
    router.authenticate = AsyncMock(
        return_value=AuthResult(ok=True, identity=UserIdentity(id=5, username="eve"), method=StrategyKind.PASSWORD)
    )
    issuer = MagicMock()
    issuer.issue.return_value = "signed"

    service = DefaultAuthenticationService(router, issuer)
    result = await service.login("eve", "pw")

    assert result.token == "signed"
    issuer.issue.assert_called_once_with(UserIdentity(id=5, username="eve"))
    request = router.authenticate.call_args[0][0]
    assert request.strategy == StrategyKind.PASSWORD
    assert request.username == "eve"


def test_build_from_environment():
    with patch.dict(os.environ, {"SECRET_KEY": SECRET, "USERS": "admin:admin"}, clear=False):
        service = AuthFactory.build(EnvConfigProvider())

    assert isinstance(service, DefaultAuthenticationService)


def test_build_requires_secret_key():
    with patch.dict(os.environ, {}, clear=True):
        with pytest.raises(ValueError, match="SECRET_KEY"):
            AuthFactory.build(EnvConfigProvider())
