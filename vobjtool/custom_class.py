from __future__ import annotations

from .helper.converter import lowercase


class ParamList(list):
    """
    Ordered metadata of a content line, searchable by case-insensitive name.
    """

    def find(self, name):
        name = lowercase(name)
        for param in self:
            if lowercase(param.name) == name:
                return param
        return None

    def names(self):
        return [param.name for param in self]


class Stack:
    def __init__(self):
        self.stack = []

    def __len__(self):
        return len(self.stack)

    def __bool__(self):
        return bool(self.stack)

    def top(self):
        return self.stack[-1] if self.stack else None

    def top_name(self):
        return self.stack[-1].name if self.stack else None

    def closes_top(self, name):
        """
        Return True if an END:name line closes the innermost item.
        """
        return bool(self.stack) and lowercase(self.top_name()) == lowercase(name)

    def push(self, obj):
        self.stack.append(obj)

    def pop(self):
        return self.stack.pop()

