"""
Locale Formatting

Turns the caller's locale argument into a date formatter for month labels.

The grouping code only ever asks for one thing: a long month name, requested
as format_date(value, {"month": "long"}). A locale argument may be:
- None: the default locale from the data dictionary
- a locale tag such as "de-DE", resolved against the configured month names
- a callable (value, options) -> str
- an object exposing format_date(value, options)
"""
import logging
from datetime import date
from typing import Any, Callable, List, Mapping, Union

from src.core.data_context import DataContext, get_data_context
from src.core.error_taxonomy import ConfigurationError, UnknownLocaleError

logger = logging.getLogger(__name__)

DateFormatter = Callable[[date, Mapping[str, str]], str]

LONG_MONTH = {"month": "long"}


class MonthNameFormatter:
    """Formats dates as long month names from a fixed twelve-name table."""

    def __init__(self, locale_tag: str, month_names: List[str]):
        if len(month_names) != 12:
            raise ConfigurationError(
                f"Locale '{locale_tag}' must define 12 month names, got {len(month_names)}",
                context={"locale": locale_tag},
            )
        self.locale_tag = locale_tag
        self.month_names = list(month_names)

    def format_date(self, value: date, options: Mapping[str, str] = None) -> str:
        options = options or LONG_MONTH
        if options.get("month") != "long":
            logger.debug(f"Unsupported format options {dict(options)}, using long month")
        return self.month_names[value.month - 1]

    def __call__(self, value: date, options: Mapping[str, str] = None) -> str:
        return self.format_date(value, options)

    def __repr__(self) -> str:
        return f"MonthNameFormatter({self.locale_tag!r})"


LocaleArg = Union[None, str, DateFormatter, Any]


def resolve_locale(locale: LocaleArg = None, data_context: DataContext = None) -> DateFormatter:
    """
    Resolve a locale argument to a date formatter.

    Raises:
        UnknownLocaleError: if a locale tag has no configured month names
        ConfigurationError: if the configured table does not have 12 names
    """
    if locale is not None and not isinstance(locale, str):
        format_date = getattr(locale, "format_date", None)
        if callable(format_date):
            return format_date
        if callable(locale):
            return locale
        raise UnknownLocaleError(
            f"Unsupported locale object of type {type(locale).__name__}",
            context={"locale": repr(locale)},
        )

    context = data_context or get_data_context()
    tag = locale or context.get_default_locale()
    names = context.get_month_names(tag)
    if names is None:
        known = sorted(context.get_month_name_tables())
        raise UnknownLocaleError(
            f"No month names configured for locale '{tag}'. Known: {known}",
            context={"locale": tag, "known": known},
        )
    return MonthNameFormatter(tag, names)


def format_month(formatter: DateFormatter, value: date) -> str:
    """Long month name for a date using the resolved formatter."""
    return formatter(value, LONG_MONTH)
