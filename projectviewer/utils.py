#  -*- coding: utf-8 -*-
"""
Small helpers shared by the engine and the view surface.
"""

from __future__ import annotations

import re
import uuid

from typing import Any


_CONTROL_CHARACTERS = re.compile(r'[\x00-\x1f\x7f<>]')
_WHITESPACE = re.compile(r'\s+')


def generate_uuid() -> str:
    """
    Return a new identifier as a 32-character hexadecimal UUID v4 string.

    >>> len(generate_uuid())
    32
    """
    return uuid.uuid4().hex


def sanitize_string(raw: Any) -> str:
    """
    Return a display-safe version of ``raw``.

    Whitespace runs collapse to a single space (tabs and newlines included),
    control characters and angle brackets are dropped, and the result is
    stripped.

    >>> sanitize_string('  Acme\\t Corp  ')
    'Acme Corp'
    >>> sanitize_string('<b>Infra</b>')
    'bInfra/b'
    """
    value = _WHITESPACE.sub(' ', str(raw))
    value = _CONTROL_CHARACTERS.sub('', value)
    return value.strip()
