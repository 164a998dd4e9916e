"""Tokenising helpers for log lines."""

from __future__ import annotations


def get_string_tokens(message: str) -> list[str]:
    """Split a message into whitespace-separated tokens."""
    return message.split()


def has_number(text: str) -> bool:
    """Return True if ``text`` contains any decimal digit."""
    return any(char.isdecimal() for char in text)