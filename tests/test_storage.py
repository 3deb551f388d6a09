import json
import tempfile
import unittest
from pathlib import Path

from regionmap.app import create_app
from regionmap.domain.regions import TOP_LEVEL_KEY
from regionmap.storage import FeatureSourceError, FileFeatureSource, LocalSlotStorage, SlotStorageError
from tests.helpers import write_dataset


class TestLocalSlotStorage(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name) / "storage"
        self.storage = LocalSlotStorage(self.root)

    def tearDown(self):
        self._tmp.cleanup()

    def test_creates_root_directory(self):
        self.assertTrue(self.root.is_dir())

    def test_missing_slot_reads_as_none(self):
        self.assertIsNone(self.storage.read_slot("custom-zones"))

    def test_write_then_read(self):
        self.storage.write_slot("custom-zones", '[{"name": "شمال"}]')
        self.assertEqual(self.storage.read_slot("custom-zones"), '[{"name": "شمال"}]')
        self.assertTrue((self.root / "custom-zones.json").exists())

    def test_overwrite_leaves_no_scratch_file(self):
        self.storage.write_slot("custom-zones", "[]")
        self.storage.write_slot("custom-zones", "[1]")
        self.assertEqual(self.storage.read_slot("custom-zones"), "[1]")
        self.assertEqual(sorted(p.name for p in self.root.iterdir()), ["custom-zones.json"])

    def test_slot_names_cannot_escape_root(self):
        for name in ("", "../outside", "nested/slot"):
            with self.subTest(name=name):
                with self.assertRaises(SlotStorageError):
                    self.storage.write_slot(name, "[]")


class TestFileFeatureSource(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = write_dataset(Path(self._tmp.name))
        self.source = FileFeatureSource(self.root)

    def tearDown(self):
        self._tmp.cleanup()

    async def test_reads_top_level(self):
        data = await self.source.fetch(TOP_LEVEL_KEY)
        self.assertEqual(data["type"], "FeatureCollection")
        self.assertEqual(len(data["features"]), 3)

    async def test_reads_subregions_of_a_region(self):
        data = await self.source.fetch("7")
        names = [f["properties"].get("name_fa") for f in data["features"]]
        self.assertIn("شیراز", names)

    async def test_missing_file_is_a_source_error(self):
        with self.assertRaises(FeatureSourceError):
            await self.source.fetch("404")

    async def test_invalid_json_is_a_source_error(self):
        (self.root / "counties" / "8.geojson").write_text("{oops", encoding="utf-8")
        with self.assertRaises(FeatureSourceError):
            await self.source.fetch("8")

    async def test_non_collection_is_a_source_error(self):
        (self.root / "counties" / "9.geojson").write_text(json.dumps({"type": "Feature"}), encoding="utf-8")
        with self.assertRaises(FeatureSourceError):
            await self.source.fetch("9")

    def test_region_ids_cannot_escape_data_dir(self):
        with self.assertRaises(FeatureSourceError):
            self.source.path_for("../provinces")


class TestDatabaseSlotStorage(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.app = create_app("testing", {
            "DATA_DIR": Path(self._tmp.name),
            "ZONE_STORAGE": "database",
        })
        self.ctx = self.app.app_context()
        self.ctx.push()

    def tearDown(self):
        from regionmap.extensions import db

        db.session.remove()
        db.drop_all()
        self.ctx.pop()
        self._tmp.cleanup()

    def test_write_then_read(self):
        from regionmap.storage.database import DatabaseSlotStorage

        storage = DatabaseSlotStorage()
        self.assertIsNone(storage.read_slot("custom-zones"))
        storage.write_slot("custom-zones", "[]")
        storage.write_slot("custom-zones", '[{"id": "zone-1"}]')
        self.assertEqual(storage.read_slot("custom-zones"), '[{"id": "zone-1"}]')

    def test_workspace_uses_database_slots(self):
        from regionmap.app.container import get_workspace
        from regionmap.extensions import db
        from regionmap.storage.database import StorageSlot

        workspace = get_workspace()
        workspace.clear_zones()
        slot = db.session.get(StorageSlot, "custom-zones")
        self.assertIsNotNone(slot)
        self.assertEqual(json.loads(slot.payload), [])


if __name__ == "__main__":
    unittest.main()
