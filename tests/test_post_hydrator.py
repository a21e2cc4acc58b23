import unittest
from datetime import datetime, timedelta

from redis.exceptions import RedisError

from fakes import FailingRedis, FakeRedis, TempAppEnvironment

from iscogram.extensions.cache import ReadThroughCache
from iscogram.schemas.cache_schema import comments_cache_schema
from iscogram.services.post_hydrator import PostHydrator


BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)


def _user(user_id=1, account_name="alice"):
    return {
        "id": user_id,
        "account_name": account_name,
        "authority": 0,
        "del_flg": 0,
        "created_at": BASE_TIME,
    }


def _row(post_id):
    return {
        "id": post_id,
        "user_id": 1,
        "body": f"post {post_id}",
        "mime": "image/jpeg",
        "created_at": BASE_TIME,
        "user": _user(),
    }


def _comment(comment_id, post_id, text, created_at):
    return {
        "id": comment_id,
        "post_id": post_id,
        "user_id": 1,
        "comment": text,
        "created_at": created_at,
        "user": _user(),
    }


class StubCommentRepository:
    def __init__(self, counts=None, comments=None):
        self.counts = counts or {}
        self.comments = comments or {}
        self.count_calls = []
        self.list_calls = []

    def count_by_post(self, post_id):
        self.count_calls.append(post_id)
        return self.counts.get(post_id, 0)

    def list_by_post(self, post_id, all_comments):
        self.list_calls.append((post_id, all_comments))
        comments = list(self.comments.get(post_id, []))
        if not all_comments:
            comments = comments[:3]
        return comments


class TestPostHydratorWithStubs(unittest.TestCase):
    def setUp(self):
        self.redis = FakeRedis()
        self.cache = ReadThroughCache(self.redis, ttl=10)

    def test_caps_output_at_page_size(self):
        hydrator = PostHydrator(self.cache, StubCommentRepository())
        posts = hydrator.hydrate([_row(i) for i in range(1, 26)], "tok", False)

        self.assertEqual(len(posts), 20)
        self.assertEqual([p["id"] for p in posts], list(range(1, 21)))

    def test_attaches_csrf_token_and_counts(self):
        repo = StubCommentRepository(counts={1: 4})
        posts = PostHydrator(self.cache, repo).hydrate([_row(1)], "tok123", False)

        self.assertEqual(posts[0]["csrf_token"], "tok123")
        self.assertEqual(posts[0]["comment_count"], 4)
        self.assertEqual(posts[0]["body"], "post 1")
        self.assertEqual(posts[0]["user"]["account_name"], "alice")

    def test_batches_cache_reads(self):
        hydrator = PostHydrator(self.cache, StubCommentRepository())
        hydrator.hydrate([_row(i) for i in range(1, 6)], "tok", False)

        self.assertEqual(self.redis.mget_calls, 2)

    def test_misses_populate_cache_with_ttl(self):
        repo = StubCommentRepository(
            counts={1: 1},
            comments={1: [_comment(1, 1, "first", BASE_TIME)]},
        )
        PostHydrator(self.cache, repo).hydrate([_row(1)], "tok", False)

        self.assertEqual(self.redis.get("comment_count_1"), "1")
        self.assertEqual(self.redis.ttls["comment_count_1"], 10)
        self.assertIsNotNone(self.redis.get("comments_1_false"))
        self.assertEqual(self.redis.ttls["comments_1_false"], 10)
        self.assertIsNone(self.redis.get("comments_1_true"))

    def test_cache_hits_skip_store(self):
        cached = [
            _comment(2, 9, "newer", BASE_TIME + timedelta(minutes=1)),
            _comment(1, 9, "older", BASE_TIME),
        ]
        self.redis.set("comment_count_9", "2")
        self.redis.set("comments_9_true", comments_cache_schema.dumps(cached))
        repo = StubCommentRepository()

        posts = PostHydrator(self.cache, repo).hydrate([_row(9)], "tok", True)

        self.assertEqual(repo.count_calls, [])
        self.assertEqual(repo.list_calls, [])
        self.assertEqual(posts[0]["comment_count"], 2)
        self.assertEqual([c["comment"] for c in posts[0]["comments"]], ["older", "newer"])
        self.assertEqual(posts[0]["comments"][0]["created_at"], BASE_TIME)
        self.assertEqual(posts[0]["comments"][0]["user"]["account_name"], "alice")

    def test_reversal_keeps_query_order_for_equal_timestamps(self):
        same_time = [
            _comment(3, 1, "c", BASE_TIME),
            _comment(2, 1, "b", BASE_TIME),
            _comment(1, 1, "a", BASE_TIME),
        ]
        repo = StubCommentRepository(counts={1: 3}, comments={1: same_time})

        posts = PostHydrator(self.cache, repo).hydrate([_row(1)], "tok", True)

        self.assertEqual([c["id"] for c in posts[0]["comments"]], [1, 2, 3])

    def test_cache_failure_aborts_whole_batch(self):
        hydrator = PostHydrator(ReadThroughCache(FailingRedis()), StubCommentRepository())

        with self.assertRaises(RedisError):
            hydrator.hydrate([_row(1), _row(2)], "tok", False)

    def test_store_failure_aborts_whole_batch(self):
        class BrokenRepository(StubCommentRepository):
            def count_by_post(self, post_id):
                if post_id == 2:
                    raise RuntimeError("query failed")
                return 0

        hydrator = PostHydrator(self.cache, BrokenRepository())

        with self.assertRaises(RuntimeError):
            hydrator.hydrate([_row(1), _row(2)], "tok", False)


class TestPostHydratorWithDatabase(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.env = TempAppEnvironment()

        from iscogram import create_app
        from iscogram.db import db
        from iscogram.models.comment_model import Comment
        from iscogram.models.post_model import Post
        from iscogram.models.user_model import User

        cls.redis = FakeRedis()
        cls.app = create_app(cls.env.config_object(), redis_client=cls.redis)
        cls.db = db
        cls.Comment = Comment
        cls.Post = Post
        cls.User = User

    @classmethod
    def tearDownClass(cls):
        cls.env.cleanup()

    def setUp(self):
        with self.app.app_context():
            self.db.drop_all()
            self.db.create_all()
            self._seed()
        self.redis.clear()

    def _seed(self):
        user = self.User(account_name="alice", passhash="x", created_at=BASE_TIME)
        commenter = self.User(account_name="bob", passhash="x", created_at=BASE_TIME)
        self.db.session.add_all([user, commenter])
        self.db.session.flush()

        for post_id, comment_total in ((1, 0), (2, 1), (3, 5)):
            self.db.session.add(self.Post(
                id=post_id,
                user_id=user.id,
                mime="image/png",
                imgdata=b"png",
                body=f"post {post_id}",
                created_at=BASE_TIME + timedelta(hours=post_id),
            ))
            for n in range(comment_total):
                self.db.session.add(self.Comment(
                    post_id=post_id,
                    user_id=commenter.id,
                    comment=f"p{post_id}c{n}",
                    created_at=BASE_TIME + timedelta(minutes=n),
                ))
        self.db.session.commit()

    def _hydrate(self, all_comments):
        from iscogram.repositories import post_repository

        rows = post_repository.list_recent_rows(20)
        hydrator = PostHydrator(ReadThroughCache(self.redis, ttl=10))
        return {
            post["id"]: post
            for post in hydrator.hydrate(rows, "tok", all_comments)
        }

    def test_latest_three_comments_in_ascending_order(self):
        with self.app.app_context():
            posts = self._hydrate(False)

        self.assertEqual(posts[1]["comment_count"], 0)
        self.assertEqual(posts[1]["comments"], [])
        self.assertEqual(posts[2]["comment_count"], 1)
        self.assertEqual([c["comment"] for c in posts[2]["comments"]], ["p2c0"])
        self.assertEqual(posts[3]["comment_count"], 5)
        self.assertEqual(
            [c["comment"] for c in posts[3]["comments"]],
            ["p3c2", "p3c3", "p3c4"],
        )
        self.assertEqual(posts[3]["comments"][0]["user"]["account_name"], "bob")

    def test_all_comments_in_ascending_order(self):
        with self.app.app_context():
            posts = self._hydrate(True)

        self.assertEqual(
            [c["comment"] for c in posts[3]["comments"]],
            ["p3c0", "p3c1", "p3c2", "p3c3", "p3c4"],
        )

    def test_cached_hydration_matches_uncached(self):
        with self.app.app_context():
            first = self._hydrate(False)
            second = self._hydrate(False)

        self.assertEqual(first[3]["comments"], second[3]["comments"])
        self.assertEqual(first[3]["comment_count"], second[3]["comment_count"])

    def test_rows_exclude_image_payload(self):
        with self.app.app_context():
            posts = self._hydrate(False)

        self.assertNotIn("imgdata", posts[1])
        self.assertEqual(posts[1]["user"]["account_name"], "alice")


if __name__ == "__main__":
    unittest.main()
