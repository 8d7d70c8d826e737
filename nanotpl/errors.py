"""
Base exceptions for user-facing errors.

All expected errors that should be displayed to the user
as clean messages (without stack traces) must inherit from NanoUserError.

Programming errors and bugs should NOT inherit from NanoUserError;
they will propagate with full tracebacks.
"""

from __future__ import annotations


class NanoUserError(Exception):
    """
    Base class for all user-facing errors of the template engine.

    These errors indicate problems that the template author can fix:
    malformed tags, unknown filters, missing imported files, etc.
    """
    pass


class TemplateSyntaxError(NanoUserError):
    """
    Raised while scanning or parsing a template.

    Always fatal to the whole render: unbalanced tags, invalid names,
    unsupported expressions, malformed blocks and imports.
    """
    pass


class TemplateRuntimeError(NanoUserError):
    """
    Raised while evaluating a parsed template against data.

    Unknown filters, failing filters, non-iterable loop targets
    and unreadable imports end up here.
    """
    pass


__all__ = ["NanoUserError", "TemplateSyntaxError", "TemplateRuntimeError"]
