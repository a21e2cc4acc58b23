import logging

from marshmallow import ValidationError
from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError

from iscogram.repositories import user_repository
from iscogram.schemas.cache_schema import user_cache_schema


logger = logging.getLogger(__name__)

USER_CACHE_KEY = "user_{}"


def anonymous_user():
    return {
        "id": 0,
        "account_name": "",
        "authority": 0,
        "del_flg": 0,
        "created_at": None,
    }


def is_login(user) -> bool:
    return bool(user) and user.get("id", 0) != 0


def load_user(user_id):
    user = user_repository.get_by_id(user_id)
    return user.to_dict() if user is not None else None


class SessionResolver:
    """Maps a session's ``user_id`` to a user, reading through the cache.

    Lookups never raise: anything that goes wrong resolves to the anonymous
    user, so the request carries on as logged out.
    """

    def __init__(self, cache, user_loader=load_user):
        self._lookup = cache.memoize(
            USER_CACHE_KEY,
            dumps=user_cache_schema.dumps,
            loads=user_cache_schema.loads,
        )(user_loader)

    def current_user(self, session):
        user_id = session.get("user_id")
        if user_id is None:
            return anonymous_user()

        try:
            user = self._lookup(int(user_id))
        except (RedisError, SQLAlchemyError, ValidationError, ValueError, TypeError):
            logger.warning("Session user %s lookup failed", user_id, exc_info=True)
            return anonymous_user()

        if not user:
            return anonymous_user()
        return user
