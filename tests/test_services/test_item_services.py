# tests/test_services/test_item_services.py
import unittest

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from core.database import Base
from core.exceptions import NotFoundError
import models_bootstrap  # noqa: F401
from tenant import service as tenant_service
from tenant.schemas import TenantCreate
from location import service as location_service
from location.schemas import LocationCreate
from item import service
from item.schemas import ItemCreate, ItemUpdate


class ItemServiceTests(unittest.TestCase):
    def setUp(self):
        self.engine = create_engine("sqlite:///:memory:", future=True)
        Base.metadata.create_all(self.engine)
        TestingSession = sessionmaker(bind=self.engine, future=True)
        self.db = TestingSession()

        self.t1 = tenant_service.create_tenant(self.db, TenantCreate(name="Home")).id
        self.t2 = tenant_service.create_tenant(self.db, TenantCreate(name="Shop", asset_id_prefix="SHOP-")).id

        self.garage = location_service.create_location(self.db, LocationCreate(tenant_id=self.t1, name="Garage")).id
        self.attic = location_service.create_location(self.db, LocationCreate(tenant_id=self.t1, name="Attic")).id
        self.shop_floor = location_service.create_location(self.db, LocationCreate(tenant_id=self.t2, name="Floor")).id

    def tearDown(self):
        self.db.close()
        self.engine.dispose()

    def _item(self, name, location_id=None, tenant_id=None, **kw):
        dto = ItemCreate(tenant_id=tenant_id or self.t1, location_id=location_id or self.garage, name=name, **kw)
        return service.create_item(self.db, dto)

    # ---- create_item ----
    def test_create_assigns_consecutive_asset_ids(self):
        a = self._item("Drill")
        b = self._item("Saw")
        self.assertEqual(a.asset_id, "000-001")
        self.assertEqual(b.asset_id, "000-002")

    def test_asset_ids_are_per_tenant(self):
        self._item("Drill")
        shop = self._item("Register", location_id=self.shop_floor, tenant_id=self.t2)
        self.assertEqual(shop.asset_id, "SHOP-001")

    def test_explicit_asset_id_does_not_consume_counter(self):
        a = self._item("Drill", asset_id="CUSTOM-9")
        b = self._item("Saw")
        self.assertEqual(a.asset_id, "CUSTOM-9")
        self.assertEqual(b.asset_id, "000-001")

    def test_auto_increment_disabled_leaves_asset_id_empty(self):
        tenant = tenant_service.get_tenant(self.db, self.t1)
        tenant.auto_increment_asset_id = False
        self.db.commit()
        self.assertIsNone(self._item("Drill").asset_id)

    def test_create_in_other_tenants_location_not_found(self):
        with self.assertRaises(NotFoundError):
            self._item("Drill", location_id=self.shop_floor)
        self.assertEqual(service.get_items(self.db, tenant_id=self.t1), [])

    # ---- queries ----
    def test_get_items_filters_by_location(self):
        self._item("Drill")
        self._item("Lamp", location_id=self.attic)
        names = [i.name for i in service.get_items(self.db, tenant_id=self.t1, location_id=self.attic)]
        self.assertEqual(names, ["Lamp"])

    def test_location_item_counts(self):
        self._item("Drill")
        self._item("Saw")
        self._item("Lamp", location_id=self.attic)
        counts = location_service.item_counts(self.db, tenant_id=self.t1)
        self.assertEqual(counts, {self.garage: 2, self.attic: 1})

    # ---- update_item ----
    def test_move_item_to_other_location(self):
        item = self._item("Drill")
        moved = service.update_item(self.db, item.id, self.t1, ItemUpdate(location=self.attic, quantity=3))
        self.assertEqual(moved.location_id, self.attic)
        self.assertEqual(moved.quantity, 3)

    def test_move_item_to_unknown_location(self):
        item = self._item("Drill")
        with self.assertRaises(NotFoundError):
            service.update_item(self.db, item.id, self.t1, ItemUpdate(location="missing"))

    def test_update_item_wrong_tenant(self):
        item = self._item("Drill")
        with self.assertRaises(NotFoundError):
            service.update_item(self.db, item.id, self.t2, ItemUpdate(name="X"))

    # ---- delete_item ----
    def test_delete_item_frees_location(self):
        item = self._item("Drill")
        self.assertTrue(service.delete_item(self.db, item.id, self.t1))
        location_service.delete_location(self.db, self.garage, self.t1)
        self.assertIsNone(location_service.get_location(self.db, self.garage))

    def test_delete_missing_item(self):
        self.assertFalse(service.delete_item(self.db, "missing", self.t1))


if __name__ == "__main__":
    unittest.main()
