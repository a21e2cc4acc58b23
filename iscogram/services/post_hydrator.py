from iscogram.repositories import comment_repository as default_comment_repository
from iscogram.schemas.cache_schema import comments_cache_schema


DEFAULT_PAGE_SIZE = 20


def comment_count_key(post_id) -> str:
    return f"comment_count_{post_id}"


def comments_key(post_id, all_comments: bool) -> str:
    return f"comments_{post_id}_{'true' if all_comments else 'false'}"


class PostHydrator:
    """Turns post rows (already joined with their owner) into page-ready posts.

    Comment counts and comment lists are read in one ``MGET`` each; misses
    are queried one post at a time and written back with the cache TTL.
    Errors from the cache, the store or cache decoding propagate unchanged:
    a page is hydrated completely or not at all.
    """

    def __init__(self, cache, comment_repository=default_comment_repository,
                 page_size: int = DEFAULT_PAGE_SIZE):
        self.cache = cache
        self.comment_repository = comment_repository
        self.page_size = page_size

    def hydrate(self, rows, csrf_token: str, all_comments: bool = False):
        rows = list(rows)
        cached_counts = self.cache.get_many(
            comment_count_key(row["id"]) for row in rows
        )
        cached_comments = self.cache.get_many(
            comments_key(row["id"], all_comments) for row in rows
        )

        posts = []
        for row in rows:
            post = dict(row)
            post["comment_count"] = self._comment_count(post["id"], cached_counts)

            comments = self._comments(post["id"], all_comments, cached_comments)
            comments.reverse()
            post["comments"] = comments

            post["csrf_token"] = csrf_token
            posts.append(post)
            if len(posts) >= self.page_size:
                break

        return posts

    def _comment_count(self, post_id, cached_counts) -> int:
        key = comment_count_key(post_id)
        cached = cached_counts.get(key)
        if cached is not None:
            return int(cached)

        count = self.comment_repository.count_by_post(post_id)
        self.cache.set(key, str(count))
        return count

    def _comments(self, post_id, all_comments, cached_comments):
        key = comments_key(post_id, all_comments)
        cached = cached_comments.get(key)
        if cached is not None:
            return comments_cache_schema.loads(cached)

        comments = self.comment_repository.list_by_post(post_id, all_comments)
        self.cache.set(key, comments_cache_schema.dumps(comments))
        return comments
