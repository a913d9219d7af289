#!/usr/bin/env python3
"""Extract compendium packs into individual source JSON files.

    extract-packs                              extract every pack
    extract-packs --pack classes               only extract one pack
    extract-packs --pack classes --name Barbarian
"""
import argparse
import re
import sys
from pathlib import Path

from .clean_packs import clean_pack_entry, data_block
from .common import PACK_DEST, PACK_EXT, PACK_SRC, PackEntryError, ensure_dir, entry_name, write_entry
from .datastore import PackDatastore

NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def output_name(name: str) -> str:
    slug = NON_ALNUM_RE.sub("-", name.lower().replace("'", ""))
    return slug.strip("-")


def subfolder_name(data: dict, pack: str) -> str:
    """Folder (relative to the pack's source folder) an entry is extracted into.

    Items are grouped by type, monsters by creature type and spells by level.
    Every other pack is extracted flat and gets an empty string.
    """
    system = data_block(data)

    if pack == "items":
        if data.get("type") == "consumable" and system.get("consumableType"):
            return str(system["consumableType"])
        return str(data.get("type") or "")

    if pack == "monsters":
        details = system.get("details")
        creature = details.get("type") if isinstance(details, dict) else None
        if not isinstance(creature, dict) or not creature.get("value"):
            return ""
        return str(creature["value"])

    if pack == "spells":
        level = system.get("level")
        if level is None:
            return ""
        if level == 0:
            return "cantrip"
        if isinstance(level, float) and level.is_integer():
            level = int(level)
        return f"level-{level}"

    return ""


def extract_pack(path: Path, name: str = None, src: Path = PACK_SRC) -> int:
    pack = path.stem
    folder = Path(src) / pack
    ensure_dir(folder)

    count = 0
    for entry in PackDatastore(path).find({}):
        lowered = entry_name(entry, path).lower()
        if name and name.lower() != lowered:
            continue
        clean_pack_entry(entry)
        subfolder = folder / subfolder_name(entry, pack)
        ensure_dir(subfolder)
        write_entry(subfolder / f"{output_name(lowered)}.json", entry)
        count += 1
    return count


def extract_packs(pack: str = None, name: str = None, src: Path = PACK_SRC, dest: Path = PACK_DEST) -> dict[str, int]:
    paths = sorted(Path(dest).glob(f"**/{pack or '*'}{PACK_EXT}"))
    return {path.stem: extract_pack(path, name, src) for path in paths}


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Extract compendium packs into source JSON files.")
    parser.add_argument("--pack", default="*", help="Only extract this compendium.")
    parser.add_argument("--name", help="Only extract the entry with this name (case-insensitive).")
    parser.add_argument("--src", type=Path, default=PACK_SRC, help="Source JSON root to write into.")
    parser.add_argument("--dest", type=Path, default=PACK_DEST, help="Folder holding the compiled packs.")
    args = parser.parse_args(argv)

    try:
        counts = extract_packs(args.pack, args.name, src=args.src, dest=args.dest)
    except PackEntryError as err:
        print(f"extract failed: {err}", file=sys.stderr)
        return 1
    for pack, count in counts.items():
        print(f"extracted {pack}: {count} entries")
    return 0


if __name__ == "__main__":
    sys.exit(main())
