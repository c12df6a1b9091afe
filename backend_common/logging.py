import logging
import os
import sys
from collections.abc import Iterable
from dataclasses import dataclass

import sentry_sdk
import structlog
from asgi_correlation_id.context import correlation_id
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
from structlog.contextvars import merge_contextvars

DEV_ENVIRONMENTS = {"local", "dev", "test"}


@dataclass(frozen=True)
class LoggingOptions:
    service_name: str
    app_env: str
    level: int
    sentry_dsn: str | None
    traces_sample_rate: float

    @classmethod
    def from_env(cls, default_service_name: str) -> "LoggingOptions":
        level_name = os.getenv("LOG_LEVEL", "INFO").upper()
        return cls(
            service_name=os.getenv("SERVICE_NAME", default_service_name),
            app_env=os.getenv("APP_ENV", "local"),
            level=getattr(logging, level_name, logging.INFO),
            sentry_dsn=os.getenv("SENTRY_DSN") or None,
            traces_sample_rate=float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.0")),
        )

    @property
    def is_dev(self) -> bool:
        return self.app_env in DEV_ENVIRONMENTS


def _stamp_service(options: LoggingOptions):
    def processor(logger, method_name, event_dict):
        event_dict["service"] = options.service_name
        event_dict["env"] = options.app_env
        return event_dict

    return processor


def _stamp_correlation_id(logger, method_name, event_dict):
    cid = correlation_id.get(None)
    if cid is not None:
        event_dict["correlation_id"] = cid
        sentry_sdk.set_tag("correlation_id", cid)
    return event_dict


def _init_sentry(options: LoggingOptions, extra_integrations: Iterable[object] | None) -> None:
    integrations = [FastApiIntegration(), SqlalchemyIntegration(), *(extra_integrations or ())]
    integrations.append(LoggingIntegration(level=logging.INFO, event_level=logging.ERROR))

    sentry_sdk.init(
        dsn=options.sentry_dsn,
        environment=options.app_env,
        integrations=integrations,
        traces_sample_rate=options.traces_sample_rate,
        send_default_pii=False,
    )
    sentry_sdk.set_tag("service", options.service_name)


def configure_logging(default_service_name: str, extra_sentry_integrations: Iterable[object] | None = None) -> None:
    """Route structlog through stdlib logging; console output in dev, JSON lines elsewhere."""
    options = LoggingOptions.from_env(default_service_name)

    if options.sentry_dsn:
        _init_sentry(options, extra_sentry_integrations)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=options.level, force=True)
    # SQL echo is controlled by the engine flag, not the root level.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    renderer = structlog.dev.ConsoleRenderer() if options.is_dev else structlog.processors.JSONRenderer()
    structlog.configure(
        processors=[
            merge_contextvars,
            _stamp_service(options),
            _stamp_correlation_id,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(options.level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
