"""
Registry of documented symbols.

The registry maps a fully-qualified alias (``Pkg.Foo.bar``) to the attributes
the link resolver needs: kind, static/inner flags and the enclosing
constructor. It is filled once from exported symbol records (JSON or inline
plugin config) and then only read.
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum

from .names import short_name

log = logging.getLogger("mkdocs.plugins.doclink")


class SymbolKind(Enum):
    CONSTRUCTOR = "constructor"
    NAMESPACE = "namespace"
    FUNCTION = "function"
    PROPERTY = "property"
    EVENT = "event"
    CONFIG = "config"


# Kinds that get a page of their own
_PAGE_KINDS = frozenset({SymbolKind.CONSTRUCTOR, SymbolKind.NAMESPACE})

# jsdoc exports use camelCase attribute names
_RECORD_KEYS = {
    "isStatic": "is_static",
    "isInner": "is_inner",
    "parentConstructor": "parent_constructor",
    "memberOf": "memberof",
    "srcFile": "src_file",
}

_TRUE_STRINGS = frozenset({"true", "yes", "1"})


@dataclass
class Symbol:
    alias: str
    name: str = ""
    kind: SymbolKind = SymbolKind.FUNCTION
    is_static: bool = False
    is_inner: bool = False
    parent_constructor: str = ""
    memberof: str = ""
    src_file: str = ""
    desc: str = ""

    def __post_init__(self):
        if not self.name:
            self.name = short_name(self.alias)
        if not self.memberof:
            self.memberof = self.parent_constructor

    def is_constructor_like(self):
        return self.kind in _PAGE_KINDS


def _flag(value):
    # exports from some tools write flags as strings
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def symbol_from_record(record):
    """Build a :class:`Symbol` from an exported record, or raise ``ValueError``."""
    if not isinstance(record, dict):
        raise ValueError(f"expected a mapping, got {type(record).__name__}")
    fields = {}
    for key, value in record.items():
        fields[_RECORD_KEYS.get(key, key)] = value
    alias = fields.get("alias")
    if not alias or not isinstance(alias, str):
        raise ValueError("record has no alias")
    try:
        kind = SymbolKind(str(fields.get("kind") or "function").lower())
    except ValueError:
        raise ValueError(f"unknown kind {fields.get('kind')!r} for {alias}") from None
    return Symbol(
        alias=alias,
        name=fields.get("name") or "",
        kind=kind,
        is_static=_flag(fields.get("is_static", False)),
        is_inner=_flag(fields.get("is_inner", False)),
        parent_constructor=fields.get("parent_constructor") or "",
        memberof=fields.get("memberof") or "",
        src_file=fields.get("src_file") or "",
        desc=fields.get("desc") or "",
    )


class SymbolRegistry:
    def __init__(self, symbols=()):
        self._symbols = {}
        for sym in symbols:
            self.register(sym)

    def register(self, symbol):
        # First registration wins, like the page registry in the plugin
        if symbol.alias not in self._symbols:
            self._symbols[symbol.alias] = symbol

    def lookup(self, alias):
        return self._symbols.get(alias)

    def __contains__(self, alias):
        return alias in self._symbols

    def __len__(self):
        return len(self._symbols)

    def __iter__(self):
        return iter(self._symbols.values())

    def add_records(self, records, origin="symbols"):
        added = 0
        for i, record in enumerate(records):
            try:
                sym = symbol_from_record(record)
            except ValueError as exc:
                log.error("doclink: bad %s[%d] (%s), skipping", origin, i, exc)
                continue
            self.register(sym)
            added += 1
        return added

    @classmethod
    def from_records(cls, records):
        reg = cls()
        reg.add_records(records)
        return reg

    def load(self, path):
        """Add the records of a JSON symbols file; returns how many were added."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as exc:
            log.error("doclink: cannot read symbols file %s: %s", path, exc)
            return 0
        except ValueError as exc:
            log.error("doclink: invalid JSON in %s: %s", path, exc)
            return 0
        if isinstance(data, dict):
            data = data.get("symbols", [])
        if not isinstance(data, list):
            log.error("doclink: %s does not contain a list of symbols", path)
            return 0
        return self.add_records(data, origin=path)
