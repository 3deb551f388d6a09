import json
import tempfile
import unittest
from pathlib import Path
from urllib.parse import quote

from regionmap.app import create_app
from tests.helpers import write_dataset

SHIRAZ_KEY = "7::شیراز"

GESTURE = [
    {"x": 52.0, "y": 29.0},
    {"x": 52.4, "y": 29.0},
    {"x": 52.4, "y": 29.4},
    {"x": 52.0, "y": 29.4},
]


class ApiTestCase(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        root = Path(self._tmp.name)
        self.data_dir = write_dataset(root / "data")
        self.storage_dir = root / "storage"
        self.app = create_app("testing", {
            "DATA_DIR": self.data_dir,
            "ZONE_STORAGE_DIR": self.storage_dir,
        })
        self.client = self.app.test_client()

    def tearDown(self):
        self._tmp.cleanup()

    def post(self, url, payload=None):
        return self.client.post(url, json=payload or {})

    def drill(self, region_id="7"):
        response = self.post("/api/view/drill", {"region_id": region_id})
        self.assertEqual(response.status_code, 200, response.get_json())
        return response.get_json()

    def draw(self):
        self.post("/api/drawing/pointer", {"phase": "down", **GESTURE[0]})
        for point in GESTURE[1:-1]:
            self.post("/api/drawing/pointer", {"phase": "move", **point})
        return self.post("/api/drawing/pointer", {"phase": "up", **GESTURE[-1]}).get_json()


class TestViewApi(ApiTestCase):

    def test_get_view_reports_state(self):
        response = self.client.get("/api/view")
        self.assertEqual(response.status_code, 200)
        state = response.get_json()["state"]
        self.assertEqual(state["view"]["level"], "regions")
        self.assertEqual(state["drawing"]["state"], "idle")

    def test_start_returns_render_commands(self):
        body = self.post("/api/view/start").get_json()
        ops = [command["op"] for command in body["commands"]]
        self.assertIn("show_features", ops)
        self.assertIn("fit_bounds", ops)
        self.assertTrue(body["applied"])

    def test_drill_into_region(self):
        body = self.drill()
        self.assertEqual(body["state"]["view"]["parent"]["id"], "7")
        self.assertEqual(body["notices"], ["Region فارس"])

    def test_drill_requires_region_id(self):
        self.assertEqual(self.post("/api/view/drill").status_code, 400)

    def test_drill_into_unknown_region(self):
        self.assertEqual(self.post("/api/view/drill", {"region_id": "404"}).status_code, 404)

    def test_click_toggles_selection(self):
        self.drill()
        body = self.post("/api/view/click", {"feature_key": SHIRAZ_KEY}).get_json()
        self.assertEqual(body["state"]["selection"]["count"], 1)
        styled = [c for c in body["commands"] if c["op"] == "apply_style"]
        self.assertEqual(styled[0]["styleClass"], "selected")

    def test_click_on_unknown_feature(self):
        self.drill()
        response = self.post("/api/view/click", {"feature_key": "7::nowhere"})
        self.assertEqual(response.status_code, 404)

    def test_hover_and_escape(self):
        self.drill()
        body = self.post("/api/view/hover", {"feature_key": SHIRAZ_KEY, "entered": True}).get_json()
        self.assertEqual(body["state"]["hover"]["title"], "شیراز")

        body = self.post("/api/view/escape").get_json()
        self.assertTrue(body["handled"])
        self.assertEqual(body["state"]["view"]["level"], "regions")


class TestSelectionApi(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.drill()
        self.post("/api/view/click", {"feature_key": SHIRAZ_KEY})

    def test_list_selection_grouped_by_parent(self):
        body = self.client.get("/api/selection").get_json()
        self.assertEqual([r["key"] for r in body["records"]], [SHIRAZ_KEY])
        self.assertEqual(body["groups"][0]["parentName"], "فارس")

    def test_remove_selection(self):
        response = self.client.delete(f"/api/selection/{quote(SHIRAZ_KEY)}")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["state"]["selection"]["count"], 0)
        response = self.client.delete(f"/api/selection/{quote(SHIRAZ_KEY)}")
        self.assertEqual(response.status_code, 404)

    def test_clear_selection(self):
        body = self.client.delete("/api/selection").get_json()
        self.assertEqual(body["cleared"], 1)


class TestDrawingApi(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.drill()
        self.post("/api/drawing/mode", {"enabled": True})

    def test_draw_and_name_a_zone(self):
        body = self.draw()
        self.assertEqual(body["state"]["drawing"]["state"], "awaiting-name")
        self.assertEqual(len(body["state"]["drawing"]["candidate"]), 4)

        response = self.post("/api/drawing/confirm", {"name": "North Zone"})
        self.assertEqual(response.status_code, 201)
        zone = response.get_json()["zone"]
        self.assertEqual(zone["name"], "North Zone")
        self.assertEqual(zone["parentId"], "7")

        listed = self.client.get("/api/zones?parent_id=7").get_json()["zones"]
        self.assertEqual([z["id"] for z in listed], [zone["id"]])
        self.assertEqual(self.client.get("/api/zones?parent_id=23").get_json()["zones"], [])

        stored = json.loads((self.storage_dir / "custom-zones.json").read_text(encoding="utf-8"))
        self.assertEqual(stored[0]["provinceId"], "7")

    def test_blank_name_is_rejected(self):
        self.draw()
        response = self.post("/api/drawing/confirm", {"name": "   "})
        self.assertEqual(response.status_code, 400)
        state = self.client.get("/api/view").get_json()["state"]
        self.assertEqual(state["drawing"]["state"], "awaiting-name")

    def test_confirm_without_candidate_conflicts(self):
        self.assertEqual(self.post("/api/drawing/confirm", {"name": "Lake"}).status_code, 409)

    def test_cancel_candidate(self):
        self.draw()
        body = self.post("/api/drawing/cancel").get_json()
        self.assertTrue(body["handled"])
        self.assertEqual(body["state"]["drawing"]["state"], "armed-for-capture")

    def test_pointer_validation(self):
        self.assertEqual(self.post("/api/drawing/pointer", {"phase": "hover"}).status_code, 400)
        self.assertEqual(self.post("/api/drawing/pointer", {"phase": "down"}).status_code, 400)
        self.assertEqual(self.post("/api/drawing/pointer", {"phase": "down", "x": "a", "y": 1}).status_code, 400)

    def test_mode_requires_flag(self):
        self.assertEqual(self.post("/api/drawing/mode").status_code, 400)

    def test_mode_flag_must_be_boolean(self):
        for value in ("false", "true", 0, 1, None):
            with self.subTest(value=value):
                response = self.post("/api/drawing/mode", {"enabled": value})
                self.assertEqual(response.status_code, 400)
        state = self.client.get("/api/view").get_json()["state"]
        self.assertEqual(state["drawing"]["state"], "armed-for-capture")

    def test_detach_mid_gesture_releases_the_map(self):
        self.post("/api/drawing/pointer", {"phase": "down", **GESTURE[0]})
        self.post("/api/drawing/pointer", {"phase": "move", **GESTURE[1]})

        body = self.post("/api/drawing/detach").get_json()
        self.assertEqual(body["state"]["drawing"]["state"], "idle")
        ops = [command["op"] for command in body["commands"]]
        self.assertIn("remove_preview_line", ops)
        interactions = [c for c in body["commands"] if c["op"] == "set_interactions"]
        self.assertEqual(interactions[-1], {"op": "set_interactions", "dragging": True, "doubleClickZoom": True})

    def test_detach_while_awaiting_name_drops_candidate(self):
        self.draw()
        body = self.post("/api/drawing/detach").get_json()
        self.assertEqual(body["state"]["drawing"], {"state": "idle", "candidate": None})
        self.assertEqual(self.post("/api/drawing/confirm", {"name": "Lake"}).status_code, 409)

    def test_mode_off_restores_interactions(self):
        body = self.post("/api/drawing/mode", {"enabled": False}).get_json()
        interactions = [c for c in body["commands"] if c["op"] == "set_interactions"]
        self.assertEqual(interactions[-1], {"op": "set_interactions", "dragging": True, "doubleClickZoom": True})


class TestZonesApi(ApiTestCase):

    def test_zone_lifecycle(self):
        self.drill()
        self.post("/api/drawing/mode", {"enabled": True})
        self.draw()
        zone_id = self.post("/api/drawing/confirm", {"name": "Lake"}).get_json()["zone"]["id"]

        self.assertEqual(len(self.client.get("/api/zones").get_json()["zones"]), 1)
        self.assertEqual(self.client.delete(f"/api/zones/{zone_id}").status_code, 200)
        self.assertEqual(self.client.delete(f"/api/zones/{zone_id}").status_code, 404)
        self.assertEqual(self.client.delete("/api/zones").get_json()["cleared"], 0)

    def test_zones_survive_restart(self):
        self.drill()
        self.post("/api/drawing/mode", {"enabled": True})
        self.draw()
        self.post("/api/drawing/confirm", {"name": "Lake"})

        restarted = create_app("testing", {
            "DATA_DIR": self.data_dir,
            "ZONE_STORAGE_DIR": self.storage_dir,
        })
        zones = restarted.test_client().get("/api/zones").get_json()["zones"]
        self.assertEqual([z["name"] for z in zones], ["Lake"])

    def test_malformed_zone_storage_starts_empty(self):
        self.storage_dir.mkdir(parents=True, exist_ok=True)
        (self.storage_dir / "custom-zones.json").write_text(
            json.dumps([{"id": "zone-1", "name": "A", "type": ["polygon"]}]),
            encoding="utf-8",
        )
        restarted = create_app("testing", {
            "DATA_DIR": self.data_dir,
            "ZONE_STORAGE_DIR": self.storage_dir,
        })
        self.assertEqual(restarted.test_client().get("/api/zones").get_json()["zones"], [])


if __name__ == "__main__":
    unittest.main()
