"""
Small formatting helpers used when rendering symbol pages: first-sentence
summaries, sort comparators, method signatures and source listing pages.
"""

import logging
import os
import re

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.util import ClassNotFound

from .names import source_page_name

log = logging.getLogger("mkdocs.plugins.doclink")

_FIRST_SENTENCE_RE = re.compile(r"(.+?\.)[^a-z0-9]", re.IGNORECASE | re.DOTALL)
_SOURCE_FMT = HtmlFormatter()


def _attr(obj, name):
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def summarize(desc):
    """Just the first sentence."""
    if desc is None:
        return None
    m = _FIRST_SENTENCE_RE.match(desc)
    return m.group(1) if m else desc


def make_sort_by(attribute):
    """Comparator ordering symbols by ``attribute``, ignoring case.

    Use with :func:`functools.cmp_to_key`. Objects missing the attribute
    compare equal to everything.
    """

    def compare(a, b):
        av, bv = _attr(a, attribute), _attr(b, attribute)
        if av is None or bv is None:
            return 0
        av, bv = str(av).lower(), str(bv).lower()
        if av < bv:
            return -1
        if av > bv:
            return 1
        return 0

    return compare


def make_signature(params, new_link):
    """Render ``(Type name, ...)`` with each type linked to its symbol page.

    ``new_link`` returns a fresh :class:`~mkdocs_doclink.link.Link`.
    Dotted names are config options of another param and are left out.
    """
    if not params:
        return "()"
    parts = []
    for param in params:
        name = _attr(param, "name") or ""
        if "." in name:
            continue
        ptype = _attr(param, "type")
        if ptype:
            parts.append(f'<span class="light">{new_link().to_symbol(ptype)} </span>{name}')
        else:
            parts.append(name)
    return "(" + ", ".join(parts) + ")"


def highlight_source(code, path=""):
    """Syntax-highlight a source file, picking the lexer from its file name."""
    try:
        lexer = get_lexer_for_filename(path, stripall=False)
    except ClassNotFound:
        lexer = TextLexer()
    return highlight(code, lexer, _SOURCE_FMT)


def make_src_file(path, src_dir, ext, name=None, highlighter=highlight_source):
    """Write the listing page for one source file.

    Returns the written path, or ``None`` when the source can't be read or
    the highlighter produced nothing.
    """
    if not name:
        name = source_page_name(path)
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            code = f.read()
    except OSError as exc:
        log.error("doclink: cannot read source %s: %s", path, exc)
        return None

    hilited = highlighter(code, path) if highlighter else ""
    if not hilited:
        return None

    out = os.path.join(src_dir, name + ext)
    os.makedirs(src_dir, exist_ok=True)
    with open(out, "w", encoding="utf-8") as f:
        f.write(hilited)
    return out
