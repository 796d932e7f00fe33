"""
Error Taxonomy for the Grouping Pipeline

Provides systematic classification of failure modes with:
- Error categories aligned to pipeline stages (resolve, group, flatten)
- Severity indicators
- Structured error context for debugging
"""

from enum import Enum, auto
from dataclasses import dataclass, field
from typing import Optional, Dict, Any
import logging
import traceback

logger = logging.getLogger(__name__)


class ErrorCategory(Enum):
    """Systematic classification of failure modes."""
    # Stage 0: Input
    RECORD_LOAD_FAILED = auto()
    INVALID_GROUPING_KEY = auto()

    # Stage 1: Key resolution
    INVALID_DATE = auto()
    UNKNOWN_LOCALE = auto()

    # System Errors
    CONFIGURATION_ERROR = auto()
    UNKNOWN_ERROR = auto()


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass
class ClassifiedError:
    """A classified error with full context."""
    category: ErrorCategory
    severity: ErrorSeverity
    message: str

    original_exception: Optional[Exception] = None
    pipeline_stage: Optional[str] = None
    context: Dict[str, Any] = field(default_factory=dict)
    stack_trace: Optional[str] = None
    user_message: Optional[str] = None

    def __post_init__(self):
        if self.original_exception and not self.stack_trace:
            self.stack_trace = ''.join(traceback.format_exception(
                type(self.original_exception),
                self.original_exception,
                self.original_exception.__traceback__
            ))

        if not self.user_message:
            self.user_message = self._generate_user_message()

    def _generate_user_message(self) -> str:
        """Generate a user-friendly error message."""
        messages = {
            ErrorCategory.INVALID_DATE: "A record has a missing or unreadable date, so it cannot be grouped by period.",
            ErrorCategory.UNKNOWN_LOCALE: "The requested locale has no month names configured.",
            ErrorCategory.INVALID_GROUPING_KEY: "One of the grouping keys is not a valid field name.",
            ErrorCategory.RECORD_LOAD_FAILED: "The input records could not be read.",
            ErrorCategory.CONFIGURATION_ERROR: "The grouping configuration is invalid.",
        }
        return messages.get(self.category, f"An error occurred: {self.message}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category.name,
            "severity": self.severity.value,
            "message": self.message,
            "user_message": self.user_message,
            "pipeline_stage": self.pipeline_stage,
            "context": self.context,
        }


class GroupingError(Exception):
    """Base exception for grouping errors with classification."""

    category = ErrorCategory.UNKNOWN_ERROR
    severity = ErrorSeverity.MEDIUM

    def __init__(self, message: str, context: Dict[str, Any] = None):
        super().__init__(message)
        self.context = context or {}

    def classify(self) -> ClassifiedError:
        return ClassifiedError(
            category=self.category,
            severity=self.severity,
            message=str(self),
            original_exception=self,
            context=dict(self.context),
        )


class InvalidDateError(GroupingError):
    """A derived key (year/month/quarter) was requested but the date is missing or invalid."""
    category = ErrorCategory.INVALID_DATE
    severity = ErrorSeverity.HIGH


class UnknownLocaleError(GroupingError):
    """No month-name table is configured for the requested locale tag."""
    category = ErrorCategory.UNKNOWN_LOCALE


class InvalidGroupingKeyError(GroupingError):
    """A grouping key is not a usable field name."""
    category = ErrorCategory.INVALID_GROUPING_KEY


class ConfigurationError(GroupingError):
    category = ErrorCategory.CONFIGURATION_ERROR
    severity = ErrorSeverity.CRITICAL


class RecordLoadError(GroupingError):
    category = ErrorCategory.RECORD_LOAD_FAILED
    severity = ErrorSeverity.HIGH


def classify_error(
    exception: Exception,
    pipeline_stage: str = None,
    context: Dict[str, Any] = None,
) -> ClassifiedError:
    """Classify an exception into a structured error."""
    context = context or {}

    if isinstance(exception, GroupingError):
        classified = exception.classify()
        classified.pipeline_stage = pipeline_stage
        classified.context.update(context)
        return classified

    if isinstance(exception, (FileNotFoundError, PermissionError, UnicodeDecodeError)):
        return ClassifiedError(
            category=ErrorCategory.RECORD_LOAD_FAILED,
            severity=ErrorSeverity.HIGH,
            message=str(exception),
            original_exception=exception,
            pipeline_stage=pipeline_stage,
            context=context,
        )

    # Default
    return ClassifiedError(
        category=ErrorCategory.UNKNOWN_ERROR,
        severity=ErrorSeverity.HIGH,
        message=str(exception),
        original_exception=exception,
        pipeline_stage=pipeline_stage,
        context=context,
    )
