"""Logging configuration with structlog integration.

Two loggers are in use:
1. loguru: general operational and debug logs
2. structlog: structured business events (proxy rejections, provider failures,
   batch summaries)
"""

import sys
from typing import Any

import structlog
from loguru import logger

from src.core.config import settings


def setup_logging() -> None:
    """Configure application logging with structlog and loguru."""
    _configure_structlog()
    _configure_loguru()

    logger.info(f"Logging configured with level: {settings.LOG_LEVEL}")


def _configure_structlog() -> None:
    if settings.ENVIRONMENT == "local":
        renderer = structlog.dev.ConsoleRenderer(colors=True)
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.CallsiteParameterAdder(
                [
                    structlog.processors.CallsiteParameter.MODULE,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                    structlog.processors.CallsiteParameter.LINENO,
                ]
            ),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            _get_log_level_number(settings.LOG_LEVEL)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def _configure_loguru() -> None:
    logger.remove()

    logger.add(
        sys.stderr,
        level=settings.LOG_LEVEL,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=True,
    )

    if settings.ENVIRONMENT != "local":
        logger.add(
            "logs/studyocean_{time:YYYY-MM-DD}.log",
            rotation="00:00",
            retention="14 days",
            level="INFO",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        )


def _get_log_level_number(level: str) -> int:
    levels = {
        "DEBUG": 10,
        "INFO": 20,
        "WARNING": 30,
        "ERROR": 40,
        "CRITICAL": 50,
    }
    return levels.get(level.upper(), 20)


# ============================================================================
# Business event logger
# ============================================================================


class BusinessEvents:
    """Structured business event helpers.

    Keeps event names and field sets consistent across modules.

    Usage:
        from src.core.infrastructure.logging import BusinessEvents

        BusinessEvents.proxy_request_rejected(host="evil.example", reason="domain")
    """

    _log = structlog.get_logger("business.events")

    @classmethod
    def proxy_request_rejected(
        cls,
        host: str | None,
        reason: str,
        **extra: Any,
    ) -> None:
        """A proxy request was refused before any outbound fetch."""
        cls._log.warning(
            "proxy_request_rejected",
            event_type="proxy_security",
            host=host,
            reason=reason,
            **extra,
        )

    @classmethod
    def upstream_degraded(
        cls,
        url: str,
        error: str,
        upstream_status: int | None = None,
        **extra: Any,
    ) -> None:
        """Upstream answered with something other than usable JSON."""
        cls._log.warning(
            "upstream_degraded",
            event_type="proxy_upstream",
            url=url,
            error=error,
            upstream_status=upstream_status,
            **extra,
        )

    @classmethod
    def provider_fetch_failed(
        cls,
        provider_name: str,
        provider_api: str,
        error: str,
        **extra: Any,
    ) -> None:
        """A provider's contribution was dropped from a batch."""
        cls._log.warning(
            "provider_fetch_failed",
            event_type="catalog_error",
            provider_name=provider_name,
            provider_api=provider_api,
            error=error,
            **extra,
        )

    @classmethod
    def provider_auth_required(
        cls,
        provider_api: str,
        action: str,
        **extra: Any,
    ) -> None:
        """Provider rejected the request with an auth error signature."""
        cls._log.info(
            "provider_auth_required",
            event_type="catalog_auth",
            provider_api=provider_api,
            action=action,
            **extra,
        )

    @classmethod
    def catalog_batch_completed(
        cls,
        providers_total: int,
        providers_failed: int,
        series_total: int,
        chunks: int,
        duration_ms: int,
        **extra: Any,
    ) -> None:
        """Summary of one BatchAggregator run."""
        cls._log.info(
            "catalog_batch_completed",
            event_type="catalog_batch",
            providers_total=providers_total,
            providers_failed=providers_failed,
            series_total=series_total,
            chunks=chunks,
            duration_ms=duration_ms,
            **extra,
        )

    @classmethod
    def feature_degraded(
        cls,
        feature: str,
        reason: str,
        **extra: Any,
    ) -> None:
        cls._log.warning(
            "feature_degraded",
            event_type="degradation",
            feature=feature,
            reason=reason,
            **extra,
        )
