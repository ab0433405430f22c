"""
Module: common.formatting

Purpose:
    Locale-aware formatting of currency, long-form dates, page labels and
    the trailing summary line. A Formatter is passed explicitly into the
    renderer so concurrent renders with different locales never share
    process-wide state (the stdlib ``locale`` module is deliberately not
    used).

Key Classes:
    - LocaleProfile: Separators, month names and label templates
    - Formatter: Formatting capability bound to one profile

Key Functions:
    - get_profile(): Look up a built-in profile by name

Dependencies:
    - decimal (std): Exact two-decimal rounding
    - datetime (std)

Used By:
    - builder.output.renderer: Summary box, metadata band, footers
    - builder.controller: Default formatter
"""

from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Dict, Tuple, Union

from report_toolkit.errors import ConfigurationError

Number = Union[int, float, Decimal]

_CENTS = Decimal("0.01")


@dataclass(frozen=True)
class LocaleProfile:
    """
    Locale conventions used by Formatter (immutable).

    Attributes:
        name: Profile identifier such as "es_MX"
        thousands_separator: Grouping separator for the integer part
        decimal_separator: Separator before the two decimals
        currency_symbol: Prefix for currency values
        month_names: Twelve month names, January first
        date_template: Long date with {day}, {month}, {year} fields
        page_template: Footer text with {page} and {total} fields
        summary_template: Trailing summary with {count} and {total} fields
        metadata_labels: Labels for name, affiliation, role, date lines
    """
    name: str
    thousands_separator: str
    decimal_separator: str
    currency_symbol: str
    month_names: Tuple[str, ...]
    date_template: str
    page_template: str
    summary_template: str
    metadata_labels: Tuple[str, str, str, str]

    def __post_init__(self) -> None:
        if len(self.month_names) != 12:
            raise ConfigurationError(
                f"Locale {self.name!r} needs 12 month names, got {len(self.month_names)}"
            )


ES_MX = LocaleProfile(
    name="es_MX",
    thousands_separator=",",
    decimal_separator=".",
    currency_symbol="$",
    month_names=(
        "enero", "febrero", "marzo", "abril", "mayo", "junio",
        "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
    ),
    date_template="{day} de {month} de {year}",
    page_template="PÁGINA {page} DE {total}",
    summary_template="{count} ARTÍCULOS CON UN VALOR TOTAL DE {total}",
    metadata_labels=("NOMBRE", "ADSCRIPCIÓN", "CARGO", "FECHA"),
)

EN_US = LocaleProfile(
    name="en_US",
    thousands_separator=",",
    decimal_separator=".",
    currency_symbol="$",
    month_names=(
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ),
    date_template="{month} {day}, {year}",
    page_template="Page {page} of {total}",
    summary_template="{count} items with total value {total}",
    metadata_labels=("Name", "Affiliation", "Role", "Date"),
)

_PROFILES: Dict[str, LocaleProfile] = {p.name: p for p in (ES_MX, EN_US)}

DEFAULT_LOCALE = "es_MX"


def get_profile(name: str) -> LocaleProfile:
    """
    Look up a built-in locale profile.

    Raises:
        ConfigurationError: If the locale is unknown
    """
    try:
        return _PROFILES[name]
    except KeyError:
        known = ", ".join(sorted(_PROFILES))
        raise ConfigurationError(f"Unknown locale {name!r} (known: {known})") from None


class Formatter:
    """
    Formatting capability for one locale.

    Example:
        >>> fmt = Formatter(EN_US)
        >>> fmt.format_currency(1234.5)
        '$1,234.50'
        >>> fmt.page_label(0, 3)
        'Page 1 of 3'
    """

    def __init__(self, profile: LocaleProfile = ES_MX) -> None:
        self.profile = profile

    @classmethod
    def for_locale(cls, name: str) -> "Formatter":
        return cls(get_profile(name))

    def format_number(self, value: Number) -> str:
        """Thousands separators and exactly two decimals."""
        amount = _to_decimal(value).quantize(_CENTS, rounding=ROUND_HALF_UP)
        sign = "-" if amount < 0 else ""
        integer, _, fraction = f"{abs(amount):f}".partition(".")
        groups = []
        while len(integer) > 3:
            groups.insert(0, integer[-3:])
            integer = integer[:-3]
        groups.insert(0, integer)
        grouped = self.profile.thousands_separator.join(groups)
        return f"{sign}{grouped}{self.profile.decimal_separator}{fraction or '00'}"

    def format_currency(self, value: Number) -> str:
        text = self.format_number(value)
        if text.startswith("-"):
            return f"-{self.profile.currency_symbol}{text[1:]}"
        return f"{self.profile.currency_symbol}{text}"

    def format_date(self, value: _dt.date) -> str:
        """Long-form localized date, e.g. '18 de octubre de 2026'."""
        return self.profile.date_template.format(
            day=value.day,
            month=self.profile.month_names[value.month - 1],
            year=value.year,
        )

    def page_label(self, page_index: int, total_pages: int) -> str:
        """Footer text for a 0-based page index."""
        return self.profile.page_template.format(page=page_index + 1, total=total_pages)

    def summary_text(self, count: int, total: Number) -> str:
        return self.profile.summary_template.format(
            count=count, total=self.format_currency(total)
        )

    def metadata_lines(
        self,
        name: str | None,
        affiliation: str | None,
        role: str | None,
        date: _dt.date,
    ) -> list[str]:
        """Label/value lines for the first-page metadata band; blanks are skipped."""
        name_label, affiliation_label, role_label, date_label = self.profile.metadata_labels
        lines = []
        if name:
            lines.append(f"{name_label}: {name}")
        if affiliation:
            lines.append(f"{affiliation_label}: {affiliation}")
        if role:
            lines.append(f"{role_label}: {role}")
        lines.append(f"{date_label}: {self.format_date(date)}")
        return lines


def parse_amount(value: object) -> Decimal | None:
    """
    Interpret a cell value as a money amount.

    Accepts numbers and numeric strings with currency symbols, spaces and
    comma thousands separators. Returns None for anything else.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        try:
            return _to_decimal(value)
        except ConfigurationError:
            return None
    text = str(value).strip().replace(",", "").replace("$", "").replace(" ", "")
    if not text:
        return None
    try:
        amount = Decimal(text)
    except InvalidOperation:
        return None
    return amount if amount.is_finite() else None


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, float):
        # repr round-trips, so 0.1 stays 0.1 rather than its binary expansion
        result = Decimal(repr(value))
    else:
        result = Decimal(value)
    if not result.is_finite():
        raise ConfigurationError(f"Cannot format non-finite amount: {value!r}")
    return result
