"""
Exception hierarchy for nfhl_util.

Every failure the tool reports on purpose derives from NFHLUtilException so
the CLI can turn it into a clean non-zero exit.
"""

from typing import Any, Dict, List, Optional


class NFHLUtilException(Exception):
    """
    Base exception for all nfhl_util errors.

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
        Initialize NFHLUtilException.

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
        Convert exception to a dictionary (used for structured logs).

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


class ValidationError(NFHLUtilException):
    """
    Raised when user input is invalid.

    Used for unknown state abbreviations, malformed FIPS codes and
    similar bad arguments.
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
            suggestions=suggestions or ["Check the input format and try again"],
        )


class ParseError(NFHLUtilException):
    """
    Raised when a FEMA response cannot be parsed.

    Used for non-JSON search responses and JSON documents whose shape does
    not match what the Map Service Center normally returns.
    """

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        """
        Initialize ParseError.

        Args:
            message: User-friendly error message
            source: URL or label of the response being parsed
            details: Technical details about the parsing failure
            suggestions: List of suggestions for resolution
        """
        error_details = details or {}
        if source:
            error_details["source"] = source

        default_suggestions = [
            "FEMA may have changed the page or response layout",
            "Re-run with --log-level DEBUG to inspect the raw response",
        ]

        super().__init__(
            message=message,
            error_code="PARSE_ERROR",
            details=error_details,
            suggestions=suggestions or default_suggestions,
        )


class PortalRequestError(NFHLUtilException):
    """
    Raised when a request to a FEMA portal fails.

    Covers connection errors, timeouts and non-2xx responses.
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        """
        Initialize PortalRequestError.

        Args:
            message: User-friendly error message
            url: URL that was requested
            status_code: HTTP status code returned, if any
            details: Technical details about the failure
            suggestions: List of suggestions for resolution
        """
        error_details = details or {}
        if url:
            error_details["url"] = url
        if status_code is not None:
            error_details["status_code"] = status_code

        default_suggestions = [
            "Check network connectivity to hazards.fema.gov and msc.fema.gov",
            "FEMA's portals are occasionally down; try again later",
        ]

        super().__init__(
            message=message,
            error_code="PORTAL_REQUEST_ERROR",
            details=error_details,
            suggestions=suggestions or default_suggestions,
        )


class StorageError(NFHLUtilException):
    """
    Raised when reading or writing local files fails.

    Used for inventory JSON files and the download cache directory.
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        error_details = details or {}
        if path:
            error_details["path"] = path

        default_suggestions = [
            "Check that the path exists and is readable/writable",
            "Verify the inventory file was produced by nfhl_util",
        ]

        super().__init__(
            message=message,
            error_code="STORAGE_ERROR",
            details=error_details,
            suggestions=suggestions or default_suggestions,
        )
