"""
Utility modules for the PLM gateway
"""

from .errors import ErrorKind, GatewayError
from .logger import setup_logging, get_logger

__all__ = [
    "ErrorKind",
    "GatewayError",
    "setup_logging",
    "get_logger",
]
