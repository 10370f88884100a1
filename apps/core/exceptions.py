"""
-------------------------------------------------------------------------
System: BMS (Barangay Management System)
Client: Barangay Local Government Unit
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Custom exceptions for the BMS system. These provide
             specific error codes and HTTP status codes for workflow,
             permission and validation violations.
-------------------------------------------------------------------------
"""
from typing import Optional


class BMSException(Exception):
    """Base exception for all BMS specific errors."""

    error_code: str = "ERR_BMS_GENERIC"
    default_message: str = "An error occurred in the BMS system."
    status_code: int = 400

    def __init__(self, message: Optional[str] = None, details: Optional[dict] = None) -> None:
        """
        Initialize BMS exception.

        Args:
            message: Custom error message. If None, uses default_message.
            details: Additional context dictionary for debugging.
        """
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.message,
            "error_code": self.error_code,
            "details": self.details
        }


# Validation Exceptions
class RecordValidationException(BMSException):
    """Raised when submitted data fails business validation."""

    error_code = "ERR_VALIDATION"
    default_message = "The submitted data is invalid."


class DuplicateRecordException(BMSException):
    """Raised when a unique value (reference number, code, name) already exists."""

    error_code = "ERR_DUPLICATE"
    default_message = "A record with the same identifier already exists."
    status_code = 409


# Workflow-related Exceptions
class WorkflowTransitionException(BMSException):
    """Raised when an invalid state transition is attempted."""

    error_code = "ERR_INVALID_TRANSITION"
    default_message = "Invalid workflow transition attempted."


class InvalidStateException(BMSException):
    """Raised when a record is not in a state that allows the operation."""

    error_code = "ERR_INVALID_STATE"
    default_message = "This operation is not allowed in the record's current status."


# Permission Exceptions
class UnauthorizedRoleException(BMSException):
    """Raised when a user lacks the required role for an action."""

    error_code = "ERR_UNAUTHORIZED_ROLE"
    default_message = "You do not have the required role to perform this action."
    status_code = 403


class FinancialPermissionException(BMSException):
    """Raised when a user lacks a financial permission flag."""

    error_code = "ERR_FINANCIAL_PERMISSION"
    default_message = "You do not have permission to perform this financial action."
    status_code = 403


class TransactionLimitExceededException(BMSException):
    """Raised when a transaction amount is above the user's limit."""

    error_code = "ERR_TRANSACTION_LIMIT"
    default_message = "Transaction amount exceeds your limit."
    status_code = 403
