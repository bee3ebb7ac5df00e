#!/usr/bin/env python3
"""
Batch resolve {@link ...} references in Markdown/HTML files.

Usage:
    python -m mkdocs_doclink.convert docs/ --symbols symbols.json
    python -m mkdocs_doclink.convert docs/api.md --symbols symbols.json --dry-run
    python -m mkdocs_doclink.convert docs/ --symbols symbols.json --base ../ --backup
    python -m mkdocs_doclink.convert docs/ --symbols symbols.json --check
"""

import argparse
import os
import shutil
import sys

from .extractor import ReferenceExtractor
from .link import LinkConfig
from .symbols import SymbolRegistry


def convert_file(path, extractor, dry_run=False, backup=False):
    """Resolve the references of one file; True when its text changed."""
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        original = f.read()

    result = extractor.substitute(original)
    if result == original or dry_run:
        return result != original

    if backup:
        shutil.copy2(path, path + ".bak")
    with open(path, "w", encoding="utf-8") as f:
        f.write(result)
    return True


def _doc_files(target, include):
    if os.path.isfile(target):
        return [target]
    exts = {e if e.startswith(".") else f".{e}" for e in include}
    found = []
    for dirpath, dirnames, fnames in os.walk(target):
        dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
        found += [
            os.path.join(dirpath, fn)
            for fn in sorted(fnames)
            if os.path.splitext(fn)[1].lower() in exts
        ]
    return found


def main(argv=None):
    p = argparse.ArgumentParser(description="Resolve {@link} references to HTML links")
    p.add_argument("path", help="Document file or directory")
    p.add_argument("--symbols", required=True, help="JSON file of exported symbols")
    p.add_argument("--base", default="", help="Prefix for links to symbol pages")
    p.add_argument("--ext", default=".html", help="Extension of symbol pages (default: .html)")
    p.add_argument(
        "--include",
        nargs="+",
        default=[".md", ".html"],
        help="Document extensions to process (default: .md .html)",
    )
    mode = p.add_mutually_exclusive_group()
    mode.add_argument(
        "--dry-run", action="store_true", help="Show which files would change without writing"
    )
    mode.add_argument(
        "--check", action="store_true", help="Exit 2 if any file still has {@link} references"
    )
    p.add_argument("--backup", action="store_true", help="Create .bak files before writing")
    args = p.parse_args(argv)

    if not os.path.exists(args.path):
        print(f"error: {args.path} not found", file=sys.stderr)
        return 1

    registry = SymbolRegistry()
    registry.load(args.symbols)
    config = LinkConfig(base=args.base, ext=args.ext)
    read_only = args.dry_run or args.check

    docs = _doc_files(args.path, args.include)
    changed = 0
    for doc in docs:
        missing = []
        extractor = ReferenceExtractor(registry, config, missing)
        if convert_file(doc, extractor, dry_run=read_only, backup=args.backup):
            changed += 1
            print(f"{'[dry-run] ' if read_only else ''}linked: {doc}")
        for name in dict.fromkeys(missing):
            print(f"{doc}: unresolved: {name}", file=sys.stderr)

    verb = "would be " if read_only else ""
    print(f"\n{changed}/{len(docs)} files {verb}modified, {len(registry)} symbols known")
    if args.check and changed:
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
