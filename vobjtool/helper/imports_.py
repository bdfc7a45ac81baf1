""" List of all common imports except __future__ and aliases"""

import weakref
from typing import TextIO

__all__ = [weakref, TextIO]
