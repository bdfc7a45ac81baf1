class VObjectError(Exception):
    def __init__(self, msg, line_number=None):
        super().__init__(msg)
        self.msg = msg
        self.line_number = line_number

    def __str__(self):
        if self.line_number is None:
            return repr(self.msg)
        return f"At line {self.line_number!s}: {self.msg!s}"


class ParseError(VObjectError):
    pass


class ContinuationError(ParseError):
    """A folded continuation line with no logical line to continue."""


class UnbalancedEndError(ParseError):
    """An END line that does not close the innermost open component."""


class UnexpectedEOFError(ParseError):
    """The stream ended while a component was still open."""
