"""
Exceptions for template-based document generation.

Handles the error kinds exposed to callers of the generator: invalid arguments,
missing templates, corrupted templates and generation failures.
"""

from typing import Optional, Any, Dict
import traceback


class RtlDocError(Exception):
    """
    Base exception for document generation errors.

    Carries a message, the causing exception (for diagnostics only), an error
    code callers can branch on and free-form details.
    """

    default_error_code: Optional[str] = None

    def __init__(self, message: str, cause: Optional[BaseException] = None,
                 error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        """
        Initialize document generation error.

        Args:
            message: Error message
            cause: Causing exception
            error_code: Error code (defaults to the class error code)
            details: Additional details
        """
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        self.traceback = traceback.format_exc() if cause is not None else None

    def get_error_info(self) -> Dict[str, Any]:
        """
        Get error information.

        Returns:
            Dictionary with error information
        """
        return {
            'type': self.__class__.__name__,
            'message': self.message,
            'cause': str(self.cause) if self.cause else None,
            'error_code': self.error_code,
            'details': self.details,
            'traceback': self.traceback
        }

    def __str__(self) -> str:
        return self.message


class InvalidArgumentError(RtlDocError, ValueError):
    """Raised before any I/O when a path is blank or the placeholder map is missing."""

    default_error_code = "invalid_argument"

    def __init__(self, message: str, argument: Optional[str] = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.argument = argument
        if argument:
            self.details.setdefault('argument', argument)


class TemplateNotFoundError(RtlDocError, FileNotFoundError):
    """Raised when no file exists at the resolved template path."""

    default_error_code = "template_not_found"

    def __init__(self, message: str, template_path: Optional[str] = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.template_path = template_path
        if template_path:
            self.details.setdefault('template_path', template_path)


class TemplateCorruptError(RtlDocError):
    """
    Raised when a template exists but fails structural validation.

    Every underlying package or XML error collapses into this one kind with a
    fixed message; the original error is kept on ``cause`` for logs only.
    """

    default_error_code = "template_corrupt"
    default_message = "File contains corrupted data."

    def __init__(self, message: Optional[str] = None, template_path: Optional[str] = None,
                 **kwargs: Any):
        super().__init__(message or self.default_message, **kwargs)
        self.template_path = template_path
        if template_path:
            self.details.setdefault('template_path', template_path)


class GenerationFailedError(RtlDocError):
    """
    Raised for any other failure while copying, transforming or persisting.

    A file may already exist at ``output_path`` when this is raised; it is
    not removed.
    """

    default_error_code = "generation_failed"

    def __init__(self, message: str, output_path: Optional[str] = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.output_path = output_path
        if output_path:
            self.details.setdefault('output_path', output_path)
