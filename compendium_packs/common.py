import json
from pathlib import Path

PACK_DEST = Path("packs")
PACK_SRC = PACK_DEST / "src"
PACK_EXT = ".db"

FILE_MODE = 0o664
DIR_MODE = 0o775


class PackEntryError(ValueError):
    """A source file or pack record that cannot be processed."""

    def __init__(self, path, message: str):
        self.path = Path(path)
        super().__init__(f"{self.path}: {message}")


def pack_path(dest: Path, pack: str) -> Path:
    return Path(dest) / f"{pack}{PACK_EXT}"


def select_folders(src: Path, pack: str = None) -> list[Path]:
    folders = [p for p in Path(src).iterdir() if p.is_dir() and (not pack or p.name == pack)]
    return sorted(folders, key=lambda p: p.name)


def source_files(folder: Path) -> list[Path]:
    return sorted(p for p in folder.rglob("*.json") if p.is_file())


def ensure_dir(path: Path) -> None:
    missing = [p for p in (path, *path.parents) if not p.exists()]
    path.mkdir(parents=True, exist_ok=True)
    for created in missing:
        created.chmod(DIR_MODE)


def entry_name(entry, path) -> str:
    if not isinstance(entry, dict):
        raise PackEntryError(path, "entry is not a JSON object")
    name = entry.get("name")
    if not isinstance(name, str):
        raise PackEntryError(path, "entry has no name")
    return name


def read_entry(path: Path) -> dict:
    try:
        with path.open("r", encoding="utf-8") as handle:
            entry = json.load(handle)
    except json.JSONDecodeError as err:
        raise PackEntryError(path, f"invalid JSON ({err})") from err
    entry_name(entry, path)
    return entry


def write_entry(path: Path, entry: dict) -> None:
    payload = json.dumps(entry, ensure_ascii=False, indent=2) + "\n"
    path.write_text(payload, encoding="utf-8")
    path.chmod(FILE_MODE)


def dump_line(entry: dict) -> str:
    return json.dumps(entry, ensure_ascii=False, separators=(",", ":")) + "\n"
