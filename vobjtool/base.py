"""vobjtool module for reading, writing and copying vCard and vCalendar trees."""

from __future__ import annotations

from .custom_class import ParamList, Stack
from .exceptions import ContinuationError, ParseError, UnbalancedEndError, UnexpectedEOFError, VObjectError
from .helper import Character as Char
from .helper import Delimiter as Delim
from .helper import get_buffer, indent_str, logger, lowercase, rejoin_utf8, split_by_size, to_vname
from .helper.imports_ import TextIO, weakref

DEFAULT_COLUMNS = 80


# --------------------------------- Main classes -------------------------------
class VBase:
    """
    Base class for ContentLine and Component.

    @ivar name:
        The name of the object, with the case it was read or created with.
        Names are always compared case-insensitively.
    @ivar line_number:
        An optional line number where the object started in its source.
    """

    def __init__(self, name, line_number=None):
        self.name = name
        self.line_number = line_number

    def copy(self, copyit):
        self.name = copyit.name
        self.line_number = copyit.line_number

    def is_named(self, name):
        return lowercase(self.name) == lowercase(name)

    def get_children(self):
        """
        Return an iterable containing the contents of the object.
        """
        return []

    def serialize(self, buf=None, columns=DEFAULT_COLUMNS, utf8_safe=False):
        """
        Serialize to buf if it exists and return the number of lines written,
        otherwise return a string.
        """
        logger.debug(f"serializing {self.name!s}")
        if buf is not None:
            return write(self, buf, columns, utf8_safe)
        outbuf = get_buffer()
        write(self, outbuf, columns, utf8_safe)
        return outbuf.getvalue()


class ContentLine(VBase):
    """
    Holds one content line for formats like vCard and vCalendar.

    For example::
      <EMAIL[TYPE=WORK]john@example.com>

    @ivar params:
        A ParamList of metadata entries.  Each entry is a ContentLine itself,
        its value is None for bare metadata like PREF.
    @ivar value:
        The value of the content line, or None if the line had no ':'.
    """

    def __init__(self, name, value=None, params=None, line_number=None):
        if not name:
            raise VObjectError("Content line without a name", line_number)
        super().__init__(name, line_number)
        self.value = value
        self.params = ParamList(params or [])

    @classmethod
    def duplicate(cls, copyit):
        newcopy = cls(copyit.name)
        newcopy.copy(copyit)
        return newcopy

    def copy(self, copyit):
        super().copy(copyit)
        self.value = copyit.value
        self.params = ParamList(param.duplicate(param) for param in copyit.params)

    def get_param(self, name):
        """
        Return the value of the first metadata entry called name.

        An entry without value gives an empty string, a missing one None.
        """
        param = self.params.find(name)
        if param is None:
            return None
        return "" if param.value is None else param.value

    def add_param(self, name, value=None):
        param = ContentLine(name, value)
        self.params.append(param)
        return param

    def remove_param(self, name):
        """
        Remove every metadata entry called name.
        """
        self.params[:] = [param for param in self.params if not param.is_named(name)]

    def __getattr__(self, name):
        """
        Make params accessible via self.foo_param.

        Underscores, legal in python variable names, are converted to dashes,
        which are legal in IANA tokens.
        """
        if name.endswith("_param"):
            value = self.get_param(to_vname(name, 6))
            if value is not None:
                return value
        raise AttributeError(name)

    def __eq__(self, other):
        if not isinstance(other, ContentLine):
            return NotImplemented
        return self.is_named(other.name) and self.value == other.value and self.params == other.params

    def text(self):
        """
        Rebuild the unfolded text line: name, metadata and value.
        """
        s = get_buffer()
        s.write(self.name)
        for param in self.params:
            s.write(f"{Delim.PARAM}{param.name}")
            if param.value is not None:
                s.write(f"{Delim.PARAM_VALUE}{dquote_escape(param.value)}")
        if self.value is not None:
            s.write(f"{Delim.VALUE}{self.value}")
        return s.getvalue()

    def __repr__(self):
        params = ";".join(param.name if param.value is None else f"{param.name}={param.value}" for param in self.params)
        return f"<{self.name}[{params}]{self.value}>"

    def pretty_print(self, level=0, tabwidth=3):
        pre = indent_str(level=level, tabwidth=tabwidth)
        print(pre, f"{self.name}:", self.value)
        if self.params:
            print(pre, "params for ", f"{self.name}:")
            for param in self.params:
                print(pre + indent_str(level=1, tabwidth=tabwidth), param.name, param.value)

    def default_serialize(self, outbuf, columns, utf8_safe):
        return fold_one_line(outbuf, self.text(), columns, utf8_safe)


class Component(VBase):
    """
    A block that starts with a BEGIN:xxxx line and ends with END:xxxx.

    @ivar properties:
        The ContentLines of the block, in file order.
    @ivar children:
        The nested Components, in file order.
    @ivar user_data:
        A free slot for applications, never used by vobjtool itself.
    """

    def __init__(self, name, line_number=None):
        super().__init__(name, line_number)
        self.properties = []
        self.children = []
        self.user_data = None
        self._parent = None

    @property
    def parent(self):
        """
        The Component this one is attached to, None for a root.
        """
        return None if self._parent is None else self._parent()

    @classmethod
    def duplicate_root(cls, copyit):
        """
        Copy name and properties, but none of the children.
        """
        newcopy = cls(copyit.name)
        newcopy.copy(copyit)
        return newcopy

    @classmethod
    def duplicate(cls, copyit):
        """
        Copy the whole subtree of copyit into a new root.
        """
        newcopy = cls.duplicate_root(copyit)
        for child in copyit.children:
            child.duplicate(child).attach(newcopy)
        return newcopy

    def copy(self, copyit):
        """
        Take over name and properties of copyit, children of self are detached.
        """
        super().copy(copyit)
        for child in list(self.children):
            child.detach()
        self.properties = [line.duplicate(line) for line in copyit.properties]

    # ------------------------------- hierarchy ------------------------------
    def attach(self, parent):
        """
        Append self to the children of parent, detaching it first.
        """
        ancestor = parent
        while ancestor is not None:
            if ancestor is self:
                raise VObjectError(f"Cannot attach {self.name} below itself")
            ancestor = ancestor.parent
        self.detach()
        parent.children.append(self)
        self._parent = weakref.ref(parent)

    def detach(self):
        parent = self.parent
        if parent is not None:
            for index, child in enumerate(parent.children):
                if child is self:
                    del parent.children[index]
                    break
        self._parent = None

    def first_child(self):
        return self.children[0] if self.children else None

    def next_sibling(self):
        parent = self.parent
        if parent is None:
            return None
        siblings = parent.children
        for index, child in enumerate(siblings):
            if child is self:
                return siblings[index + 1] if index + 1 < len(siblings) else None
        return None

    def root(self):
        obj = self
        while obj.parent is not None:
            obj = obj.parent
        return obj

    # ------------------------------- contents -------------------------------
    def add(self, obj_or_name, value=None):
        """
        Add obj_or_name to the properties, or to the children for a Component.

        If obj_or_name is a string, a ContentLine with that name and value is
        created.
        """
        if isinstance(obj_or_name, Component):
            obj_or_name.attach(self)
            return obj_or_name
        obj = obj_or_name if isinstance(obj_or_name, ContentLine) else ContentLine(obj_or_name, value)
        self.properties.append(obj)
        return obj

    def remove(self, obj):
        """
        Remove obj from the properties or the children.
        """
        if isinstance(obj, Component):
            if obj.parent is self:
                obj.detach()
            return
        for index, line in enumerate(self.properties):
            if line is obj:
                del self.properties[index]
                return

    def get_property(self, name):
        """
        Return the first ContentLine called name, or None.
        """
        return next(self.get_properties(name), None)

    def get_properties(self, name):
        return (line for line in self.properties if line.is_named(name))

    def get_child_value(self, child_name, default=None):
        """
        Return the value of the first ContentLine called child_name, or default.
        """
        line = self.get_property(child_name)
        return default if line is None else line.value

    def get_children(self):
        """
        Return an iterable of all properties, then all child components.
        """
        yield from self.properties
        yield from self.children

    def components(self, name=None):
        """
        Return an iterable of the child Components, optionally only those called name.
        """
        return (child for child in self.children if name is None or child.is_named(name))

    def lines(self):
        return iter(self.properties)

    def walk(self):
        """
        Yield self and every descendant, depth first.
        """
        yield self
        for child in self.children:
            yield from child.walk()

    def __eq__(self, other):
        if not isinstance(other, Component):
            return NotImplemented
        return self.is_named(other.name) and self.properties == other.properties and self.children == other.children

    def __repr__(self):
        return f"<{self.name or '*unnamed*'}| {list(self.get_children())}>"

    def pretty_print(self, level=0, tabwidth=3):
        pre = indent_str(level=level, tabwidth=tabwidth)
        print(pre, self.name)
        for child in self.get_children():
            child.pretty_print(level + 1, tabwidth)

    def default_serialize(self, outbuf, columns, utf8_safe):
        # BEGIN and END are recognised on the first physical line, never fold them
        outbuf.write(f"{Delim.BEGIN}{self.name}{Char.LF}")
        nlines = 1
        for line in self.properties:
            nlines += line.default_serialize(outbuf, columns, utf8_safe)
        for child in self.children:
            nlines += child.default_serialize(outbuf, columns, utf8_safe)
        outbuf.write(f"{Delim.END}{self.name}{Char.LF}")
        return nlines + 1


# --------------------------- Parsing functions --------------------------------
def find_delimiter(text, delimiter, start=0):
    """
    Return the index of the first delimiter in text outside quotes, or None.

    A quote character opens an escape that lasts until the same character
    comes back, the other quote character has no meaning inside it.
    """
    escape = None
    for pos in range(start, len(text)):
        char = text[pos]
        if escape:
            if char == escape:
                escape = None
        elif char in Char.QUOTES:
            escape = char
        elif char == delimiter:
            return pos
    return None


def split_unescaped(text, delimiter):
    """
    Split text at every delimiter outside quotes.
    """
    parts, start = [], 0
    pos = find_delimiter(text, delimiter)
    while pos is not None:
        parts.append(text[start:pos])
        start = pos + 1
        pos = find_delimiter(text, delimiter, start)
    parts.append(text[start:])
    return parts


def unquote(value):
    if len(value) >= 2 and value[0] in Char.QUOTES and value[-1] == value[0]:
        return value[1:-1]
    return value


def parse_params(string, line_number=None):
    """
    Parse the metadata block of a line, without the leading ';'.

    Return a list of (name, value) tuples, value is None for bare metadata.
    """
    all_parameters = []
    for segment in split_unescaped(string, Delim.PARAM):
        if not segment:
            continue
        pos = find_delimiter(segment, Delim.PARAM_VALUE)
        name = segment if pos is None else segment[:pos]
        if not name:
            raise ParseError(f"Metadata without a name: {segment!s}", line_number)
        all_parameters.append((name, None if pos is None else unquote(segment[pos + 1 :])))
    return all_parameters


def parse_line(line, line_number=None):
    """
    Split a logical line into (name, params, value).
    """
    pos = find_delimiter(line, Delim.VALUE)
    head, value = (line, None) if pos is None else (line[:pos], line[pos + 1 :])

    pos = find_delimiter(head, Delim.PARAM)
    name, params = (head, []) if pos is None else (head[:pos], parse_params(head[pos + 1 :], line_number))
    if not name:
        raise ParseError(f"Failed to parse line: {line!s}", line_number)
    return name, params, value


def text_line_to_content_line(text, n=None):
    name, params, value = parse_line(text, n)
    return ContentLine(name, value, [ContentLine(*param) for param in params], line_number=n)


class ComponentReader:
    """
    Read one top level Component at a time from a stream.

    Folded lines are joined while reading: a line starting with a space or a
    tab continues the previous line.  BEGIN and END lines are recognised on
    their first physical line.

    Malformed input is logged and skipped.  In strict mode the matching
    ParseError is raised instead.

    @ivar line_number:
        The number of physical lines consumed so far, kept across components.
    """

    def __init__(self, stream_or_string, strict=False):
        self.stream = get_buffer(stream_or_string)
        self.strict = strict
        self.line_number = 0

    def __iter__(self):
        while True:
            component = self.next_component()
            if component is None:
                return
            yield component

    def report(self, error_class, msg, line_number):
        error = error_class(msg, line_number)
        if self.strict:
            raise error
        logger.error(str(error))

    def add_line(self, stack, text, n):
        top = stack.top()
        if top is None:
            logger.warning(f"Skipped line: {n}, message: no component open")
            return
        try:
            top.add(text_line_to_content_line(rejoin_utf8(text), n))
        except ParseError as e:
            if self.strict:
                raise
            logger.error(f"Skipped line: {e.line_number or '?'}, message: {e.msg!s}")

    def next_component(self):
        """
        Return the next complete top level Component, or None.

        None is returned at the end of the stream, also when the stream ends
        inside a component; the partial component is dropped then.
        """
        stack = Stack()
        logical_line = get_buffer()
        line_start_number = 0

        while True:
            line = self.stream.readline()
            if line == "":
                break
            self.line_number += 1
            line = line.rstrip(Char.LINE_TRAILERS)
            if not line:
                continue

            # 1. continuation of the pending line
            if line[0] in Char.SPACEORTAB:
                if logical_line.tell() == 0:
                    self.report(ContinuationError, "Continuation line without a line to continue", self.line_number)
                else:
                    logical_line.write(line[1:])
                continue

            # 2. a fresh line completes the pending one
            if logical_line.tell() > 0:
                self.add_line(stack, logical_line.getvalue(), line_start_number)
                logical_line = get_buffer()

            # 3. hierarchy
            if line[: len(Delim.BEGIN)].upper() == Delim.BEGIN:
                component = Component(line[len(Delim.BEGIN) :], line_number=self.line_number)
                if stack:
                    component.attach(stack.top())
                stack.push(component)
            elif line[: len(Delim.END)].upper() == Delim.END:
                name = line[len(Delim.END) :]
                if stack.closes_top(name):
                    component = stack.pop()
                    if not stack:
                        return component  # EXIT POINT
                elif not stack:
                    self.report(
                        UnbalancedEndError,
                        f"Attempted to end the {name} component but it was never opened",
                        self.line_number,
                    )
                else:
                    self.report(UnbalancedEndError, f"{stack.top_name()} component wasn't closed", self.line_number)
            else:
                logical_line.write(line)
                line_start_number = self.line_number

        if logical_line.tell() > 0 and not stack:
            self.add_line(stack, logical_line.getvalue(), line_start_number)
        if stack:
            msg = f"unexpected EOF, component {stack.top_name()!s} was never closed"
            self.report(UnexpectedEOFError, msg, self.line_number)
        return None


def read_components(stream_or_string, strict=False):
    """
    Generate one Component at a time from a stream.
    """
    yield from ComponentReader(stream_or_string, strict)


def read_one(stream_or_string, strict=False):
    """
    Return the first component from stream, or None.
    """
    return next(read_components(stream_or_string, strict), None)


# --------------------------- Serializing functions ----------------------------
def dquote_escape(param):
    """
    Return param, or param in quotes if it holds a separator or a quote.

    Double quotes are used unless param holds one.  A param holding both quote
    characters can't be wrapped; it is written as is when it reads back
    unchanged, that is when its quotes pair up and no separator is left
    outside of them.
    """
    if not any(char in param for char in Delim.VALUE + Delim.PARAM + Char.QUOTES):
        return param
    if Char.DQUOTE not in param:
        return f"{Char.DQUOTE}{param}{Char.DQUOTE}"
    if Char.SQUOTE not in param:
        return f"{Char.SQUOTE}{param}{Char.SQUOTE}"
    if (
        find_delimiter(param + Delim.VALUE, Delim.VALUE) == len(param)
        and find_delimiter(param, Delim.PARAM) is None
        and unquote(param) == param
    ):
        return param
    raise VObjectError(f"Parameter value {param!r} can't be quoted.")


def fold_one_line(outbuf: TextIO, input_: str, columns=DEFAULT_COLUMNS, utf8_safe=False):
    """
    Write input_ folded at columns, return the number of physical lines.

    columns counts utf-8 bytes, columns == 0 disables folding.
    """
    if not columns:
        outbuf.write(f"{input_}{Char.LF}")
        return 1
    nlines = 0
    for chunk in split_by_size(input_, columns, utf8_safe):
        if nlines:
            outbuf.write(Char.SPACE)
        outbuf.write(f"{chunk}{Char.LF}")
        nlines += 1
    return nlines


def write(obj, stream, columns=DEFAULT_COLUMNS, utf8_safe=False):
    """
    Write obj and its children to stream, return the number of physical lines.
    """
    if not isinstance(obj, (Component, ContentLine)):
        raise VObjectError(f"Cannot serialize {obj!r}")
    return obj.default_serialize(stream, columns, utf8_safe)
