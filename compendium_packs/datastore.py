"""Line-oriented pack datastore.

A pack file holds one JSON record per line. Writers only ever append, so a
later line with the same ``_id`` supersedes an earlier one and a line of the
form ``{"$$deleted": true, "_id": ...}`` removes the record. Index metadata
lines (``$$indexCreated``) are ignored.
"""
import json
import random
import string
from pathlib import Path

from .common import FILE_MODE, PackEntryError, dump_line

ID_ALPHABET = string.ascii_letters + string.digits
ID_LENGTH = 16


def new_id(n: int = ID_LENGTH) -> str:
    return "".join(random.choice(ID_ALPHABET) for _ in range(n))


def _matches(record: dict, query: dict) -> bool:
    return all(key in record and record[key] == value for key, value in query.items())


class PackDatastore:
    def __init__(self, path: Path):
        self.path = Path(path)
        self._records = None

    @property
    def records(self) -> dict:
        if self._records is None:
            self.load()
        return self._records

    def load(self) -> None:
        records = {}
        if self.path.exists():
            text = self.path.read_text(encoding="utf-8")
            for lineno, line in enumerate(text.splitlines(), start=1):
                if not line.strip():
                    continue
                try:
                    doc = json.loads(line)
                except json.JSONDecodeError as err:
                    raise PackEntryError(self.path, f"line {lineno}: invalid JSON ({err})") from err
                if not isinstance(doc, dict):
                    raise PackEntryError(self.path, f"line {lineno}: record is not a JSON object")
                if "$$indexCreated" in doc:
                    continue
                if doc.get("$$deleted") is True:
                    records.pop(doc.get("_id"), None)
                    continue
                # Records without an id never supersede anything.
                key = doc["_id"] if "_id" in doc else object()
                records.pop(key, None)
                records[key] = doc
        self._records = records

    def find(self, query: dict = None) -> list[dict]:
        query = query or {}
        return [doc for doc in self.records.values() if _matches(doc, query)]

    def find_one(self, query: dict):
        for doc in self.records.values():
            if _matches(doc, query):
                return doc
        return None

    def insert(self, doc: dict) -> dict:
        exists = self.path.exists()
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(dump_line(doc))
        if not exists:
            self.path.chmod(FILE_MODE)
        if self._records is not None:
            key = doc["_id"] if "_id" in doc else object()
            self._records.pop(key, None)
            self._records[key] = doc
        return doc

    def create_new_id(self) -> str:
        while True:
            candidate = new_id()
            if candidate not in self.records:
                return candidate


class PackCache:
    """One datastore per pack file, shared by every lookup in a single run."""

    def __init__(self):
        self._stores = {}

    def get(self, path: Path) -> PackDatastore:
        key = str(Path(path))
        if key not in self._stores:
            self._stores[key] = PackDatastore(path)
        return self._stores[key]

    def __len__(self) -> int:
        return len(self._stores)
