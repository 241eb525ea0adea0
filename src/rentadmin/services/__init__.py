"""
Services module for Rentalist Admin
"""

from .i18n import (
    SUPPORTED_LANGUAGES,
    DEFAULT_LANGUAGE,
    STATUS_CHOICES,
    get_language,
    translate,
    get_dictionary,
    status_label,
    status_options,
)

__all__ = [
    'SUPPORTED_LANGUAGES',
    'DEFAULT_LANGUAGE',
    'STATUS_CHOICES',
    'get_language',
    'translate',
    'get_dictionary',
    'status_label',
    'status_options',
]
