from backend_common.logging import configure_logging as _configure_logging
from sentry_sdk.integrations.redis import RedisIntegration


def configure_logging() -> None:
    _configure_logging("diary-service", extra_sentry_integrations=[RedisIntegration()])
