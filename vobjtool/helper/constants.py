class Character:
    """Space, quote and line-break characters"""

    CR = "\r"
    LF = "\n"
    CRLF = CR + LF
    SPACE = " "
    TAB = "\t"
    SPACEORTAB = SPACE + TAB
    LINE_TRAILERS = "\r\n\v\f"
    DQUOTE = '"'
    SQUOTE = "'"
    QUOTES = DQUOTE + SQUOTE


class Delimiter:
    """Separators of a content line: NAME;META=VALUE:VALUE"""

    VALUE = ":"
    PARAM = ";"
    PARAM_VALUE = "="
    BEGIN = "BEGIN:"
    END = "END:"
