"""
Link builder for symbol, source-file and plain-file references.

A :class:`Link` is created per link, configured with chained calls and then
turned into either an ``<a>`` element or a bare href::

    Link(registry, cfg).to_symbol("Pkg.Foo.bar").target("main").resolve()

Unknown symbols never fail: the reference text comes back unchanged so a
broken or forward reference can't stop the build.
"""

import logging
import os
import re
from dataclasses import dataclass
from enum import Enum

from .names import source_page_name

log = logging.getLogger("mkdocs.plugins.doclink")

# Identifier-like runs inside an alias; "#name" is a same-page anchor
_SYMBOL_TOKEN_RE = re.compile(r"(?<![\w$])([\w$#.-]+)\b")

# Characters JavaScript's escape() leaves alone
_ESCAPE_SAFE = "@*_+-./"

_GLOBAL_PAGE = "_global_"


@dataclass(frozen=True)
class LinkConfig:
    base: str = ""
    ext: str = ".html"
    src_dir: str = "symbols/src/"


class RefKind(Enum):
    ANCHOR = "anchor"
    ALIAS = "alias"
    SOURCE = "source"
    FILE = "file"


# Higher wins when a builder is pointed at more than one kind
_PRECEDENCE = {
    RefKind.FILE: 0,
    RefKind.SOURCE: 1,
    RefKind.ALIAS: 2,
    RefKind.ANCHOR: 2,
}


@dataclass(frozen=True)
class SymbolReference:
    token: str
    kind: RefKind


def classify_token(token):
    if token.startswith("#"):
        return SymbolReference(token, RefKind.ANCHOR)
    return SymbolReference(token, RefKind.ALIAS)


def symbol_link_name(symbol):
    """Anchor name of a member on its constructor's page: ``.x``, ``-x`` or ``x``."""
    if symbol.is_static:
        return "." + symbol.name
    if symbol.is_inner:
        return "-" + symbol.name
    return symbol.name


def escape(text):
    """Percent-encode like JavaScript's ``escape()``: ``%XX`` below 256, else ``%uXXXX``."""
    out = []
    for ch in text:
        code = ord(ch)
        if ch in _ESCAPE_SAFE or (code < 128 and ch.isalnum()):
            out.append(ch)
        elif code < 0x100:
            out.append(f"%{code:02X}")
        elif code < 0x10000:
            out.append(f"%u{code:04X}")
        else:
            # astral characters are escaped as their UTF-16 surrogate pair
            code -= 0x10000
            out.append(f"%u{0xD800 + (code >> 10):04X}%u{0xDC00 + (code & 0x3FF):04X}")
    return "".join(out)


class Link:
    def __init__(self, registry, config=None, unresolved=None):
        self.registry = registry
        self.config = config or LinkConfig()
        self.unresolved = unresolved
        self.ref = None
        self.text = ""
        self.target_name = ""

    def target(self, target_name):
        if target_name:
            self.target_name = target_name
        return self

    def with_text(self, text):
        if text:
            self.text = text
        return self

    def to_symbol(self, alias):
        if alias:
            self._point_at(SymbolReference(str(alias), RefKind.ALIAS))
        return self

    def to_src(self, filename):
        if filename:
            self._point_at(SymbolReference(filename, RefKind.SOURCE))
        return self

    def to_file(self, file):
        if file:
            self._point_at(SymbolReference(file, RefKind.FILE))
        return self

    def _point_at(self, ref):
        if self.ref is None or _PRECEDENCE[ref.kind] >= _PRECEDENCE[self.ref.kind]:
            self.ref = ref

    def resolve(self, as_html=True):
        ref = self.ref
        if ref is None:
            log.debug("doclink: link resolved with no target")
            return ""
        if ref.kind is RefKind.SOURCE:
            return self._make_src_link(ref.token, as_html)
        if ref.kind is RefKind.FILE:
            return self._make_file_link(ref.token, as_html)
        return _SYMBOL_TOKEN_RE.sub(
            lambda m: self._make_symbol_link(classify_token(m.group(1)), as_html), ref.token
        )

    def __str__(self):
        return self.resolve()

    def _render(self, href, default_text, as_html):
        if not as_html:
            return href
        target = f' target="{self.target_name}"' if self.target_name else ""
        return f'<a href="{href}"{target}>{self.text or default_text}</a>'

    def _make_symbol_link(self, ref, as_html):
        if ref.kind is RefKind.ANCHOR:
            return self._render(ref.token, ref.token, as_html)

        symbol = self.registry.lookup(ref.token)
        if symbol is None:
            log.debug("doclink: no symbol named %s, leaving text as is", ref.token)
            if self.unresolved is not None:
                self.unresolved.append(ref.token)
            return ref.token

        cfg = self.config
        if symbol.is_constructor_like():
            path = escape(symbol.alias) + cfg.ext
        else:
            # method or property: anchor on the enclosing constructor's page
            page = escape(symbol.parent_constructor) if symbol.parent_constructor else _GLOBAL_PAGE
            path = f"{page}{cfg.ext}#{symbol_link_name(symbol)}"
        return self._render(cfg.base + path, ref.token, as_html)

    def _make_src_link(self, src_path, as_html):
        href = self.config.src_dir + source_page_name(src_path) + self.config.ext
        return self._render(href, os.path.basename(src_path.replace("\\", "/")), as_html)

    def _make_file_link(self, file_path, as_html):
        return self._render(self.config.base + file_path, file_path, as_html)
