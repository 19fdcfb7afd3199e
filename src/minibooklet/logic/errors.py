# minibooklet/src/minibooklet/logic/errors.py
"""
Exception types raised by the imposition logic.
"""


class BookletError(Exception):
    """Base class for every error raised by the booklet logic."""


class LoadError(BookletError):
    """The source document could not be read."""


class EmptyDocumentError(BookletError):
    """The source document has no pages."""


class EmptySelectionError(BookletError):
    """A page selection expression did not name a single valid page."""


class OptionsError(BookletError):
    """An option value is not one of the supported choices."""


class FoldDefinitionError(BookletError):
    """A fold sequence does not describe a foldable sheet."""


class InvalidGridError(FoldDefinitionError):
    """Grid cell count does not match the number of folds."""


class UnsupportedAxisSequenceError(FoldDefinitionError):
    """A fold cannot bisect the current sheet extent along its axis."""
