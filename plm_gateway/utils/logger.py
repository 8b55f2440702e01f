"""
Logging utilities for the PLM gateway

Provides centralized structlog/stdlib logging configuration and helpers.
"""

import os
import sys
import logging
import logging.config
from typing import Any, Dict, Optional

import structlog
import yaml

REDACTED = "***"
SENSITIVE_KEYS = {"password", "authorization", "token", "access_token", "sessionid"}

# Default logging configuration
DEFAULT_LOGGING_CONFIG = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'plain': {
            'format': '%(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'level': 'INFO',
            'formatter': 'plain',
            'stream': 'ext://sys.stdout'
        }
    },
    'root': {
        'level': 'INFO',
        'handlers': ['console'],
    },
    'loggers': {
        'httpx': {
            'level': 'WARNING',
        },
        'httpcore': {
            'level': 'WARNING',
        },
    }
}


def _load_config_file(config_path: str) -> Optional[Dict[str, Any]]:
    """Load a YAML dictConfig file, returning None when unusable"""
    if not config_path or not os.path.exists(config_path):
        return None
    try:
        with open(config_path, 'r') as f:
            return yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        print(f"Failed to load logging config from {config_path}: {e}", file=sys.stderr)
        return None


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "console",
    config_path: Optional[str] = None
) -> None:
    """
    Setup logging configuration

    Args:
        log_level: Minimum level for gateway loggers
        log_format: 'console' for human readable lines, 'json' for one JSON object per line
        config_path: Optional YAML file with a logging dictConfig
    """
    log_level = log_level.upper()
    config = _load_config_file(config_path) if config_path else None

    if not config:
        config = {
            **DEFAULT_LOGGING_CONFIG,
            'handlers': {k: dict(v) for k, v in DEFAULT_LOGGING_CONFIG['handlers'].items()},
            'root': dict(DEFAULT_LOGGING_CONFIG['root']),
        }
        config['root']['level'] = log_level
        for handler_config in config['handlers'].values():
            handler_config['level'] = log_level

    logging.config.dictConfig(config)

    renderer = (
        structlog.processors.JSONRenderer()
        if log_format == "json"
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str):
    """
    Get logger instance

    Args:
        name: Logger name (usually __name__)

    Returns:
        structlog BoundLogger
    """
    return structlog.get_logger(name)


def redact(payload: Any) -> Any:
    """Return a copy of payload with credential values masked"""
    if isinstance(payload, dict):
        return {
            key: REDACTED if str(key).lower() in SENSITIVE_KEYS else redact(value)
            for key, value in payload.items()
        }
    if isinstance(payload, list):
        return [redact(item) for item in payload]
    return payload
