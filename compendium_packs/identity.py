from pathlib import Path

from .common import PACK_DEST, pack_path
from .datastore import PackCache


def determine_id(data: dict, pack: str, cache: PackCache, dest: Path = PACK_DEST) -> str:
    """Reuse the id of the packed entry with the same name, or mint a new one.

    Nothing is inserted into the pack; the new id only becomes permanent once
    the entry is compiled.
    """
    db = cache.get(pack_path(dest, pack))
    entry = db.find_one({"name": data.get("name")})
    if entry is not None and "_id" in entry:
        return entry["_id"]
    return db.create_new_id()
