"""
Module: common

Purpose:
    Helpers shared across the toolkit that are not layout-specific.
"""

from .formatting import (
    DEFAULT_LOCALE,
    EN_US,
    ES_MX,
    Formatter,
    LocaleProfile,
    get_profile,
    parse_amount,
)

__all__ = [
    "DEFAULT_LOCALE",
    "EN_US",
    "ES_MX",
    "Formatter",
    "LocaleProfile",
    "get_profile",
    "parse_amount",
]
