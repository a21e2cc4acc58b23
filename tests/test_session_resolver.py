import unittest
from datetime import datetime

from sqlalchemy.exc import OperationalError

from fakes import FailingRedis, FakeRedis

from iscogram.extensions.cache import ReadThroughCache
from iscogram.schemas.cache_schema import user_cache_schema
from iscogram.services.session_service import SessionResolver, is_login


ALICE = {
    "id": 3,
    "account_name": "alice",
    "authority": 0,
    "del_flg": 0,
    "created_at": datetime(2024, 1, 1, 9, 30, 0),
}


class TestSessionResolver(unittest.TestCase):
    def setUp(self):
        self.redis = FakeRedis()
        self.loaded = []

    def _loader(self, user_id):
        self.loaded.append(user_id)
        return dict(ALICE) if user_id == ALICE["id"] else None

    def _resolver(self, redis=None, loader=None):
        return SessionResolver(
            ReadThroughCache(redis or self.redis, ttl=10),
            user_loader=loader or self._loader,
        )

    def test_missing_user_id_is_anonymous(self):
        user = self._resolver().current_user({})

        self.assertFalse(is_login(user))
        self.assertEqual(user["id"], 0)
        self.assertEqual(self.loaded, [])

    def test_miss_loads_from_store_and_caches(self):
        user = self._resolver().current_user({"user_id": 3})

        self.assertTrue(is_login(user))
        self.assertEqual(user["account_name"], "alice")
        self.assertEqual(self.loaded, [3])
        self.assertIsNotNone(self.redis.get("user_3"))
        self.assertEqual(self.redis.ttls["user_3"], 10)

    def test_hit_skips_store(self):
        self.redis.set("user_3", user_cache_schema.dumps(ALICE))

        user = self._resolver().current_user({"user_id": 3})

        self.assertEqual(self.loaded, [])
        self.assertEqual(user, ALICE)

    def test_unknown_user_is_anonymous_and_not_cached(self):
        user = self._resolver().current_user({"user_id": 99})

        self.assertFalse(is_login(user))
        self.assertIsNone(self.redis.get("user_99"))

    def test_cache_failure_fails_open(self):
        user = self._resolver(redis=FailingRedis()).current_user({"user_id": 3})

        self.assertFalse(is_login(user))

    def test_store_failure_fails_open(self):
        def broken_loader(user_id):
            raise OperationalError("SELECT", {}, Exception("db down"))

        user = self._resolver(loader=broken_loader).current_user({"user_id": 3})

        self.assertFalse(is_login(user))

    def test_corrupt_cache_entry_fails_open(self):
        self.redis.set("user_3", "not json")

        user = self._resolver().current_user({"user_id": 3})

        self.assertFalse(is_login(user))

    def test_non_numeric_user_id_fails_open(self):
        user = self._resolver().current_user({"user_id": "abc"})

        self.assertFalse(is_login(user))


if __name__ == "__main__":
    unittest.main()
