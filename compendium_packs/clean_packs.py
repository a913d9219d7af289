#!/usr/bin/env python3
"""Clean source JSON files in place.

    clean-packs                              clean every source file
    clean-packs --pack classes               clean one compendium
    clean-packs --pack classes --name Barbarian
"""
import argparse
import re
import sys
from pathlib import Path

from .common import PACK_DEST, PACK_SRC, PackEntryError, read_entry, select_folders, source_files, write_entry
from .datastore import PackCache
from .identity import determine_id

WORD_JOINER_RE = re.compile("\u2060")
SINGLE_QUOTE_RE = re.compile("[\u2018\u2019]")
DOUBLE_QUOTE_RE = re.compile("[\u201c\u201d]")

STRIPPED_FLAG_SCOPES = ("importSource", "exportSource")
EMBEDDED_COLLECTIONS = ("effects", "items")


def clean_string(value: str) -> str:
    """Drop invisible word joiners and straighten curly quotes."""
    value = WORD_JOINER_RE.sub("", value)
    value = SINGLE_QUOTE_RE.sub("'", value)
    return DOUBLE_QUOTE_RE.sub('"', value)


def data_block(data: dict) -> dict:
    for key in ("system", "data"):
        block = data.get(key)
        if isinstance(block, dict):
            return block
    return {}


def clean_pack_entry(data: dict, clear_source_id: bool = True) -> None:
    """Strip permissions, import/export flags and empty flag scopes from an entry.

    Embedded effects and items are cleaned too, but always keep their
    ``core.sourceId`` flag. Applying this twice has no further effect.
    """
    # Any object counts as set, even an empty one; falsy scalars do not.
    permission = data.get("permission")
    if isinstance(permission, dict) or permission:
        data["permission"] = {"default": 0}

    if data.get("flags") is None:
        data["flags"] = {}
    flags = data["flags"]
    if isinstance(flags, dict):
        core = flags.get("core")
        if clear_source_id and isinstance(core, dict):
            core.pop("sourceId", None)
        for scope in STRIPPED_FLAG_SCOPES:
            flags.pop(scope, None)
        for scope, contents in list(flags.items()):
            if isinstance(contents, dict) and not contents:
                del flags[scope]

    for collection in EMBEDDED_COLLECTIONS:
        embedded = data.get(collection)
        if not isinstance(embedded, list):
            continue
        for child in embedded:
            if isinstance(child, dict):
                clean_pack_entry(child, clear_source_id=False)

    description = data_block(data).get("description")
    if isinstance(description, dict) and isinstance(description.get("value"), str) and description["value"]:
        description["value"] = clean_string(description["value"])
    for key in ("label", "name"):
        if isinstance(data.get(key), str) and data[key]:
            data[key] = clean_string(data[key])


def clean_packs(pack: str = None, name: str = None, src: Path = PACK_SRC, dest: Path = PACK_DEST,
                cache: PackCache = None) -> dict[str, int]:
    entry_name = name.lower() if name else None
    cache = cache if cache is not None else PackCache()
    counts = {}
    for folder in select_folders(src, pack):
        count = 0
        for path in source_files(folder):
            entry = read_entry(path)
            if entry_name and entry_name != entry["name"].lower():
                continue
            clean_pack_entry(entry)
            if not entry.get("_id"):
                entry["_id"] = determine_id(entry, folder.name, cache, dest=dest)
            path.unlink()
            write_entry(path, entry)
            count += 1
        counts[folder.name] = count
    return counts


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Clean and format source JSON files, assigning missing ids.")
    parser.add_argument("--pack", help="Only clean the source files of this compendium.")
    parser.add_argument("--name", help="Only clean the entry with this name (case-insensitive).")
    parser.add_argument("--src", type=Path, default=PACK_SRC, help="Source JSON root.")
    parser.add_argument("--dest", type=Path, default=PACK_DEST, help="Compiled pack folder used to look up ids.")
    args = parser.parse_args(argv)

    try:
        counts = clean_packs(args.pack, args.name, src=args.src, dest=args.dest)
    except PackEntryError as err:
        print(f"clean failed: {err}", file=sys.stderr)
        return 1
    for pack, count in counts.items():
        print(f"cleaned {pack}: {count} entries")
    return 0


if __name__ == "__main__":
    sys.exit(main())
