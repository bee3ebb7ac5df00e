"""
Helpers for splitting dotted symbol aliases and naming generated pages.
"""

import re

_RELATIVE_PREFIX_RE = re.compile(r"\.\.?[\\/]")
_PATH_SEP_RE = re.compile(r"[\\/]")


def short_name(alias):
    """``"Foo.util.Bar"`` -> ``"Bar"``."""
    return alias.split(".")[-1]


def package_name(alias):
    """``"Foo.util.Bar"`` -> ``"Foo.util"``; a single segment has no package."""
    return ".".join(alias.split(".")[:-1])


def is_inherited(subject, from_symbol=None):
    """Is ``subject`` documented on a symbol other than ``from_symbol``?

    ``from_symbol`` defaults to ``subject`` itself, so a member is inherited
    unless it is a member of its own alias.
    """
    if from_symbol is None:
        from_symbol = subject
    return subject.memberof != from_symbol.alias


def source_page_name(path):
    # "../lib/core.js" -> "lib_core.js"
    return _PATH_SEP_RE.sub("_", _RELATIVE_PREFIX_RE.sub("", path))
