"""
Utilities Package - Logging and Exception Handling
"""
from .logging import get_logger, setup_logging
from .exceptions import (
    ClinicDiagnosisError,
    DiagnosisNotFoundError,
    AuthContextError,
    InvalidArgumentError,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "ClinicDiagnosisError",
    "DiagnosisNotFoundError",
    "AuthContextError",
    "InvalidArgumentError",
]
