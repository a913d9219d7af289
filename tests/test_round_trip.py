import json
import tempfile
import unittest
from pathlib import Path

from compendium_packs.clean_packs import clean_packs
from compendium_packs.compile_packs import compile_packs
from compendium_packs.extract_packs import extract_packs


class RoundTripTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.dest = Path(self._tmp.name) / "packs"
        self.src = self.dest / "src"
        folder = self.src / "items"
        folder.mkdir(parents=True)
        for doc in (
            {"name": "Potion of Healing", "type": "consumable", "data": {"consumableType": "potion"}},
            {"name": "Longsword", "type": "weapon", "data": {}},
            {"name": "Rope", "type": "loot", "data": {}, "flags": {"core": {"sourceId": "Item.rope"}}},
        ):
            path = folder / f"{doc['name'].lower().replace(' ', '-')}.json"
            path.write_text(json.dumps(doc), encoding="utf-8")

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _ids(self) -> dict:
        text = (self.dest / "items.db").read_text(encoding="utf-8")
        return {doc["name"]: doc["_id"] for doc in map(json.loads, text.splitlines())}

    def test_ids_survive_compile_extract_compile(self) -> None:
        clean_packs(src=self.src, dest=self.dest)
        compile_packs(src=self.src, dest=self.dest)
        first = self._ids()
        first_bytes = (self.dest / "items.db").read_bytes()

        extract_packs(src=self.src, dest=self.dest)
        self.assertTrue((self.src / "items" / "potion" / "potion-of-healing.json").exists())
        self.assertTrue((self.src / "items" / "weapon" / "longsword.json").exists())
        for path in (self.src / "items").glob("*.json"):
            path.unlink()

        compile_packs(src=self.src, dest=self.dest)
        self.assertEqual(self._ids(), first)
        self.assertEqual((self.dest / "items.db").read_bytes(), first_bytes)

    def test_clean_reuses_compiled_ids(self) -> None:
        clean_packs(src=self.src, dest=self.dest)
        compile_packs(src=self.src, dest=self.dest)
        first = self._ids()

        for path in (self.src / "items").glob("*.json"):
            doc = json.loads(path.read_text(encoding="utf-8"))
            del doc["_id"]
            path.write_text(json.dumps(doc), encoding="utf-8")
        clean_packs(src=self.src, dest=self.dest)
        compile_packs(src=self.src, dest=self.dest)
        self.assertEqual(self._ids(), first)


if __name__ == "__main__":
    unittest.main()
