import unittest
from types import SimpleNamespace as Obj
from unittest.mock import patch
from fastapi.testclient import TestClient

from main import app
from core.database import get_db
from auth.services.auth_service import get_current_active_user
from authz.deps import require_manager


def _tenant(**kw):
    base = dict(id=1, name="Home", description="", asset_id_prefix="000-", auto_increment_asset_id=True)
    base.update(kw)
    return Obj(**base)


class TenantRouterTests(unittest.TestCase):
    def setUp(self):
        class FakeDB:
            def rollback(self): pass
        def _fake_db():
            yield FakeDB()

        app.dependency_overrides[get_db] = _fake_db
        app.dependency_overrides[get_current_active_user] = lambda: Obj(id=10, tenant_id=1, role="owner")
        app.dependency_overrides[require_manager] = lambda: 1

        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.pop(get_db, None)
        app.dependency_overrides.pop(get_current_active_user, None)
        app.dependency_overrides.pop(require_manager, None)

    @patch("tenant.router.service.get_tenant")
    def test_get_my_tenant_200(self, mock_get):
        mock_get.return_value = _tenant()
        resp = self.client.get("/api/tenants/me")
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["data"]["name"], "Home")
        mock_get.assert_called_once()
        self.assertEqual(mock_get.call_args.args[1], 1)

    @patch("tenant.router.service.get_tenant")
    def test_get_my_tenant_404(self, mock_get):
        mock_get.return_value = None
        resp = self.client.get("/api/tenants/me")
        self.assertEqual(resp.status_code, 404)

    @patch("tenant.router.service.update_tenant_settings")
    def test_patch_settings(self, mock_update):
        mock_update.return_value = _tenant(asset_id_prefix="HOME-")
        resp = self.client.patch("/api/tenants/me", json={"asset_id_prefix": "HOME-"})
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["data"]["asset_id_prefix"], "HOME-")

    def test_patch_rejects_unknown_fields(self):
        resp = self.client.patch("/api/tenants/me", json={"next_value": 99})
        self.assertEqual(resp.status_code, 400)


class UserRouterTests(unittest.TestCase):
    def setUp(self):
        app.dependency_overrides[get_current_active_user] = lambda: Obj(
            id=10, tenant_id=1, username="ana", email="ana@example.com", role="admin"
        )
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.pop(get_current_active_user, None)

    def test_me(self):
        resp = self.client.get("/api/users/me")
        self.assertEqual(resp.status_code, 200, resp.text)
        self.assertEqual(resp.json()["data"]["role"], "admin")


if __name__ == "__main__":
    unittest.main()
