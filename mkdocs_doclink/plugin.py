"""
MkDocs plugin that resolves ``{@link ...}`` symbol references.

Hooks into the MkDocs build: loads the symbol registry while the config is
read, rewrites references on every page, and optionally writes highlighted
source listing pages after the site is built.
"""

import fnmatch
import logging
import os
import re

from mkdocs.config import config_options
from mkdocs.config.base import Config as MkDocsConfig
from mkdocs.plugins import BasePlugin

from .extractor import ReferenceExtractor
from .formatting import make_src_file
from .link import LinkConfig
from .names import source_page_name
from .symbols import SymbolRegistry

log = logging.getLogger("mkdocs.plugins.doclink")

_FENCE_RE = re.compile(
    r"^[ \t]*(`{3,}|~{3,})[^\n]*\n.*?^[ \t]*\1[`~]*[ \t]*$", re.MULTILINE | re.DOTALL
)
_CODE_SPAN_RE = re.compile(r"(?<!`)(`+)(?!`)(.+?)(?<!`)\1(?!`)")


class DoclinkConfig(MkDocsConfig):
    link_base = config_options.Type(str, default="")
    ext = config_options.Type(str, default=".html")
    src_dir = config_options.Type(str, default="symbols/src/")
    symbols = config_options.Type(list, default=[])
    symbols_file = config_options.Type(str, default="")
    link_target = config_options.Type(str, default="")
    resolve_links = config_options.Type(bool, default=True)
    warn_unresolved = config_options.Type(bool, default=True)
    source_pages = config_options.Type(bool, default=False)
    source_root = config_options.Type(str, default="")
    source_extensions = config_options.Type(list, default=[".js"])
    source_exclude = config_options.Type(list, default=[])


def _source_listing(root, extensions, exclude):
    """Source files under ``root`` as sorted ``(page name, path)`` pairs."""
    exts = {e.lower() if e.startswith(".") else f".{e.lower()}" for e in extensions}
    pages = {}
    for dirpath, dirnames, fnames in os.walk(root):
        dirnames[:] = [d for d in dirnames if not d.startswith(".")]
        for fn in fnames:
            if os.path.splitext(fn)[1].lower() not in exts:
                continue
            path = os.path.join(dirpath, fn)
            rel = os.path.relpath(path, root).replace(os.sep, "/")
            if any(fnmatch.fnmatch(rel, p) or fnmatch.fnmatch(fn, p) for p in exclude):
                continue
            pages[source_page_name(rel)] = path
    return sorted(pages.items())



def _resolve_path(path, config_dir):
    if not os.path.isabs(path):
        path = os.path.normpath(os.path.join(config_dir, path))
    return path


class DoclinkPlugin(BasePlugin[DoclinkConfig]):

    def __init__(self):
        super().__init__()
        self._registry = SymbolRegistry()
        self._link_config = LinkConfig()
        self._config_dir = os.getcwd()

    # ── Symbol registry ──

    def _build_registry(self, config_dir):
        registry = SymbolRegistry()
        sf = self.config.get("symbols_file", "")
        if sf:
            sf = _resolve_path(sf, config_dir)
            if not os.path.isfile(sf):
                log.error("doclink: symbols file missing: %s", sf)
            else:
                registry.load(sf)
        inline = self.config.get("symbols", [])
        if inline:
            registry.add_records(inline, origin="symbols")
        return registry

    def _extractor(self, unresolved=None):
        return ReferenceExtractor(self._registry, self._link_config, unresolved)

    def _apply_links(self, markdown, page_uri=""):
        # Keep code blocks and inline code safe from link rewriting
        protected = {}
        counter = [0]

        def _protect(m):
            key = f"\x00DLCODE{counter[0]}\x00"
            protected[key] = m.group(0)
            counter[0] += 1
            return key

        text = _FENCE_RE.sub(_protect, markdown)
        text = _CODE_SPAN_RE.sub(_protect, text)

        unresolved = []
        text = self._extractor(unresolved).substitute(text)

        for key, val in protected.items():
            text = text.replace(key, val)

        if unresolved and self.config["warn_unresolved"]:
            for name in dict.fromkeys(unresolved):
                log.warning("doclink: %s: unresolved reference to '%s'", page_uri, name)
        return text

    def make_link(self):
        """A fresh link builder bound to this build's registry and settings."""
        return self._extractor().link().target(self.config.get("link_target", ""))

    # ── Source listing pages ──

    def _write_source_pages(self, site_dir):
        root = self.config.get("source_root", "")
        if not root:
            log.error("doclink: source_pages is on but source_root is not set")
            return 0
        root = _resolve_path(root, self._config_dir)
        if not os.path.isdir(root):
            log.error("doclink: source root missing: %s", root)
            return 0
        out_dir = os.path.join(site_dir, self._link_config.src_dir)
        written = 0
        for name, path in _source_listing(
            root, self.config["source_extensions"], self.config["source_exclude"]
        ):
            if make_src_file(path, out_dir, self._link_config.ext, name=name):
                written += 1

        log.info("doclink: %d source pages written to %s", written, out_dir)
        return written

    # ── MkDocs lifecycle hooks ──

    def on_config(self, config, **kwargs):
        self._config_dir = os.path.dirname(config.get("config_file_path", "") or "") or os.getcwd()
        self._link_config = LinkConfig(
            base=self.config["link_base"],
            ext=self.config["ext"],
            src_dir=self.config["src_dir"],
        )
        self._registry = self._build_registry(self._config_dir)
        nsym = len(self._registry)
        if nsym:
            log.info("doclink: symbol registry built, %d symbols indexed", nsym)
        return config

    def on_page_markdown(self, markdown, *, page, config, files, **kwargs):
        if not self.config["resolve_links"]:
            return markdown
        src_uri = getattr(page.file, "src_uri", None) or page.file.src_path
        return self._apply_links(markdown, src_uri)

    def on_post_build(self, *, config, **kwargs):
        if self.config["source_pages"]:
            self._write_source_pages(config["site_dir"])

