"""
vobjtool: read, edit and write vCard and vCalendar documents.

A document is a tree of Components (the BEGIN:xxx / END:xxx blocks), each
holding an ordered list of ContentLines and an ordered list of child
Components.  Folded lines are joined while reading and folded again while
writing, at 80 columns by default.

Usage::

    >>> import vobjtool
    >>> card = vobjtool.read_one("BEGIN:VCARD\\nFN:John Doe\\nEND:VCARD\\n")
    >>> card.get_child_value("fn")
    'John Doe'
"""

from .base import (
    Component,
    ComponentReader,
    ContentLine,
    find_delimiter,
    read_components,
    read_one,
    text_line_to_content_line,
    write,
)
from .exceptions import ContinuationError, ParseError, UnbalancedEndError, UnexpectedEOFError, VObjectError
from .helper import lowercase

VERSION = "1.0.0"
