#!/usr/bin/env python3
"""Compile source JSON files into compendium packs.

    compile-packs                  compile every source folder
    compile-packs --pack classes   only compile one pack
"""
import argparse
import sys
from pathlib import Path

from .clean_packs import clean_pack_entry
from .common import (
    FILE_MODE, PACK_DEST, PACK_SRC, PackEntryError, ensure_dir, pack_path, read_entry, select_folders, source_files,
)
from .datastore import PackDatastore


def sort_key(entry: dict) -> str:
    return str(entry.get("_id", ""))


def compile_pack(folder: Path, dest: Path = PACK_DEST) -> int:
    target = pack_path(dest, folder.name)
    target.unlink(missing_ok=True)
    target.write_text("", encoding="utf-8")
    target.chmod(FILE_MODE)

    entries = []
    for path in source_files(folder):
        entry = read_entry(path)
        clean_pack_entry(entry)
        entries.append(entry)

    entries.sort(key=sort_key)
    db = PackDatastore(target)
    for entry in entries:
        db.insert(entry)
    return len(entries)


def compile_packs(pack: str = None, src: Path = PACK_SRC, dest: Path = PACK_DEST) -> dict[str, int]:
    folders = select_folders(src, pack)
    ensure_dir(Path(dest))
    return {folder.name: compile_pack(folder, dest) for folder in folders}


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Compile source JSON files into compendium packs.")
    parser.add_argument("--pack", help="Only compile this compendium.")
    parser.add_argument("--src", type=Path, default=PACK_SRC, help="Source JSON root.")
    parser.add_argument("--dest", type=Path, default=PACK_DEST, help="Output folder for compiled packs.")
    args = parser.parse_args(argv)

    try:
        counts = compile_packs(args.pack, src=args.src, dest=args.dest)
    except PackEntryError as err:
        print(f"compile failed: {err}", file=sys.stderr)
        return 1
    for pack, count in counts.items():
        print(f"compiled {pack}: {count} entries")
    return 0


if __name__ == "__main__":
    sys.exit(main())
