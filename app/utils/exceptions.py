"""
Custom Exception Hierarchy

Provides specific exception types for the diagnosis service layer
with structured error information.
"""
from typing import Optional, Dict, Any


class ClinicDiagnosisError(Exception):
    """Base exception for all diagnosis service errors."""

    status_code = 500

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details
        }


class DiagnosisNotFoundError(ClinicDiagnosisError):
    """Diagnosis record does not exist in the caller's organization."""

    status_code = 404

    def __init__(
        self,
        diagnosis_id: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message="diagnosis not found",
            code="NOT_FOUND",
            details={"diagnosis_id": diagnosis_id, **(details or {})}
        )
        self.diagnosis_id = diagnosis_id


class AuthContextError(ClinicDiagnosisError):
    """Request carries no organization or user identity."""

    status_code = 401

    def __init__(
        self,
        message: str = "missing auth context",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="UNAUTHENTICATED",
            details=details
        )


class InvalidArgumentError(ClinicDiagnosisError):
    """Caller supplied an argument the service cannot act on."""

    status_code = 400

    def __init__(
        self,
        message: str,
        field: str = "unknown",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="INVALID_ARGUMENT",
            details={"field": field, **(details or {})}
        )
        self.field = field
