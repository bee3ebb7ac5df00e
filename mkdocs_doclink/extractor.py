"""
Find ``{@link ...}`` references in documentation text and turn them into
HTML links.
"""

import re

from .link import Link, LinkConfig

_LINK_TAG_RE = re.compile(r"\{@link ([^}\s]+)\s*\}", re.IGNORECASE)


class ReferenceExtractor:
    def __init__(self, registry, config=None, unresolved=None):
        self.registry = registry
        self.config = config or LinkConfig()
        self._unresolved = unresolved if unresolved is not None else []

    @property
    def unresolved(self):
        """Tokens that had no matching symbol, in the order they were met."""
        return self._unresolved

    def link(self):
        return Link(self.registry, self.config, self._unresolved)

    def substitute(self, text):
        return _LINK_TAG_RE.sub(lambda m: self.link().to_symbol(m.group(1)).resolve(), text)

    def linkify(self, text):
        """Link every bare symbol name in ``text``, e.g. a type like ``Pkg.Foo|String``."""
        if not text:
            return text
        return self.link().to_symbol(text).resolve()
