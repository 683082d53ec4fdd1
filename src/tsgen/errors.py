"""
Error definitions for tsgen.

The declaration builders never raise for filtered or unrepresentable types;
these errors cover the outer surfaces (templates, input loading).
"""


class TsgenError(Exception):
    """Base exception for all tsgen errors."""
    pass


class TemplateError(TsgenError):
    """Error during template compilation or rendering."""
    pass


class InputError(TsgenError):
    """Error resolving or importing the modules that provide root types."""
    pass
