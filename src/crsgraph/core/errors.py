"""
Exception hierarchy for crsgraph.

The conversion core reports "no path between two systems" as a None result.
The exceptions below are raised by the convenience layers built on top of it
(transformer service, CRS-aware geometry) and by invalid construction
parameters.
"""

from typing import Any, Dict, List, Optional


class CrsGraphException(Exception):
    """
    Base exception for all crsgraph-specific errors.

    Attributes:
        error_code: String identifier for the error type
        message: User-friendly error message
        details: Technical details for logging/debugging
        suggestions: Optional list of resolution suggestions
    """

    def __init__(
        self,
        message: str,
        error_code: str,
        details: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        """
        Initialize CrsGraphException.

        Args:
            message: User-friendly error message
            error_code: String identifier for the error type
            details: Technical details for logging
            suggestions: List of suggestions for resolution
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.suggestions = suggestions or []

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to a dictionary.

        Returns:
            Dictionary representation of the error
        """
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "suggestions": self.suggestions,
        }

    def __str__(self) -> str:
        return f"{self.error_code}: {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"error_code='{self.error_code}', "
            f"message='{self.message}')"
        )


class ValidationError(CrsGraphException):
    """
    Raised when construction parameters are unusable.

    Used for degenerate projection parameters or malformed geometry bounds.
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        error_details = details or {}
        if field:
            error_details["field"] = field

        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            details=error_details,
            suggestions=suggestions or ["Check the input values and try again"],
        )


class CRSError(CrsGraphException):
    """
    Raised when a coordinate reference system operation fails.

    Args:
        message: User-friendly error message
        source_crs: Label of the source coordinate reference system
        target_crs: Label of the target coordinate reference system
        details: Technical details about the CRS error
        suggestions: List of suggestions for fixing the CRS issue
        error_code: Overrides the default error code in subclasses
    """

    default_error_code = "CRS_ERROR"
    default_suggestions = [
        "Verify the coordinate reference system is supported",
        "Ensure coordinates are in the expected axis order",
    ]

    def __init__(
        self,
        message: str,
        source_crs: Optional[str] = None,
        target_crs: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        error_details = details or {}
        if source_crs:
            error_details["source_crs"] = source_crs
        if target_crs:
            error_details["target_crs"] = target_crs

        super().__init__(
            message=message,
            error_code=self.default_error_code,
            details=error_details,
            suggestions=suggestions or list(self.default_suggestions),
        )


class NotConvertibleError(CRSError):
    """Raised when no chain of conversions links two reference systems."""

    default_error_code = "NOT_CONVERTIBLE"
    default_suggestions = [
        "Register a conversion between the two systems",
        "Check that both systems are connected to a common hub such as WGS84",
    ]


class TransformationError(CRSError):
    """Raised when a conversion exists but applying it fails."""

    default_error_code = "TRANSFORMATION_ERROR"


class ConfigurationError(CrsGraphException):
    """Raised when library configuration is invalid."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        error_details = details or {}
        if config_key:
            error_details["config_key"] = config_key

        default_suggestions = [
            "Check CRSGRAPH_* environment variables are set correctly",
            "Verify .env file syntax",
        ]

        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            details=error_details,
            suggestions=suggestions or default_suggestions,
        )
