import unittest
from types import SimpleNamespace as Obj

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from core.database import Base, get_db
from auth.services.auth_service import get_current_active_user
import models_bootstrap  # noqa: F401
from tenant import service as tenant_service
from tenant.schemas import TenantCreate


class LocationTreeFlowTests(unittest.TestCase):
    def setUp(self):
        self.engine = create_engine(
            "sqlite:///:memory:",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            future=True,
        )
        Base.metadata.create_all(self.engine)
        self.SessionLocal = sessionmaker(bind=self.engine, future=True)

        # --- Dependency overrides ---
        def _get_db_override():
            db = self.SessionLocal()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = _get_db_override

        # --- Seed two tenants ---
        with self.SessionLocal() as db:
            self.t1 = tenant_service.create_tenant(db, TenantCreate(name="T1")).id
            self.t2 = tenant_service.create_tenant(db, TenantCreate(name="T2")).id

        self._as(self.t1)
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.pop(get_db, None)
        app.dependency_overrides.pop(get_current_active_user, None)
        self.engine.dispose()

    def _as(self, tenant_id, role="owner"):
        # created_by stays NULL, there is no users row for this fake caller
        app.dependency_overrides[get_current_active_user] = lambda: Obj(id=None, tenant_id=tenant_id, role=role)

    def _post(self, name, parent=None):
        body = {"name": name}
        if parent:
            body["parent"] = parent
        r = self.client.post("/api/locations", json=body)
        self.assertEqual(r.status_code, 201, r.text)
        return r.json()["data"]

    def test_example_scenarios(self):
        # 1) root
        w = self._post("Warehouse")
        self.assertEqual(w["path"], w["id"])
        self.assertEqual(w["level"], 0)

        # 2) child
        s = self._post("Shelf A", parent=w["id"])
        self.assertEqual(s["path"], f"{w['id']},{s['id']}")
        self.assertEqual(s["level"], 1)

        # 6) tree listing
        r = self.client.get("/api/locations?flat=false")
        self.assertEqual(r.status_code, 200, r.text)
        tree = r.json()["data"]
        self.assertEqual(len(tree), 1)
        self.assertEqual(tree[0]["id"], w["id"])
        self.assertEqual([c["id"] for c in tree[0]["children"]], [s["id"]])
        self.assertEqual(tree[0]["children"][0]["children"], [])

        # 3) cycle
        r = self.client.put(f"/api/locations/{w['id']}", json={"name": "Warehouse", "parent": s["id"]})
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()["message"], "Cannot set a child location as parent")

        # 4) delete with child
        r = self.client.delete(f"/api/locations/{w['id']}")
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()["message"], "Cannot delete location. It has 1 child locations.")

        # 5) delete leaf
        r = self.client.delete(f"/api/locations/{s['id']}")
        self.assertEqual(r.status_code, 200, r.text)
        r = self.client.get(f"/api/locations/{w['id']}/descendants")
        self.assertEqual(r.json()["data"], [])

    def test_self_parent_is_rejected(self):
        w = self._post("Warehouse")
        r = self.client.put(f"/api/locations/{w['id']}", json={"name": "Warehouse", "parent": w["id"]})
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()["message"], "Location cannot be its own parent")

    def test_occupied_location_cannot_be_deleted(self):
        w = self._post("Warehouse")
        r = self.client.post("/api/items", json={"name": "Drill", "location": w["id"]})
        self.assertEqual(r.status_code, 201, r.text)
        self.assertEqual(r.json()["data"]["asset_id"], "000-001")

        r = self.client.get("/api/locations?flat=true")
        self.assertEqual(r.json()["data"][0]["item_count"], 1)

        r = self.client.delete(f"/api/locations/{w['id']}")
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()["message"], "Cannot delete location. It contains 1 items.")

    def test_reparent_rewrites_subtree(self):
        w = self._post("Warehouse")
        s = self._post("Shelf", parent=w["id"])
        b = self._post("Bin", parent=s["id"])
        g = self._post("Garage")

        r = self.client.put(f"/api/locations/{s['id']}", json={"name": "Shelf", "parent": g["id"]})
        self.assertEqual(r.status_code, 200, r.text)

        r = self.client.get(f"/api/locations/{b['id']}/path")
        chain = r.json()["data"]
        self.assertEqual([l["id"] for l in chain], [g["id"], s["id"], b["id"]])
        self.assertEqual([l["level"] for l in chain], [0, 1, 2])
        self.assertEqual(chain[-1]["path"], f"{g['id']},{s['id']},{b['id']}")

    def test_other_tenant_sees_not_found(self):
        w = self._post("Warehouse")
        self._as(self.t2)
        self.assertEqual(self.client.get(f"/api/locations/{w['id']}").status_code, 404)
        r = self.client.post("/api/locations", json={"name": "Box", "parent": w["id"]})
        self.assertEqual(r.status_code, 404)
        self.assertEqual(r.json()["message"], "Parent location not found")
        self.assertEqual(self.client.delete(f"/api/locations/{w['id']}").status_code, 404)
        self.assertEqual(self.client.get("/api/locations").json()["data"], [])

    def test_bulk_then_detail(self):
        r = self.client.post(
            "/api/locations/bulk",
            json={"locations": [
                {"name": "House"},
                {"name": "Kitchen", "parent_index": 0},
                {"name": "Pantry", "parent_index": 1},
            ]},
        )
        self.assertEqual(r.status_code, 201, r.text)
        house, kitchen, pantry = r.json()["data"]
        self.assertEqual(pantry["level"], 2)

        r = self.client.get(f"/api/locations/{house['id']}")
        detail = r.json()["data"]
        self.assertEqual([c["id"] for c in detail["children"]], [kitchen["id"]])
        self.assertEqual(detail["item_count"], 0)
        self.assertEqual(self.client.get("/api/locations/count").json()["count"], 3)

    def test_viewer_is_read_only(self):
        self._as(self.t1, role="viewer")
        self.assertEqual(self.client.post("/api/locations", json={"name": "Box"}).status_code, 403)
        self.assertEqual(self.client.get("/api/locations").status_code, 200)


if __name__ == "__main__":
    unittest.main()
