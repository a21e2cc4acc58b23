import redis
from flask import current_app


def build_redis_client(config):
    return redis.Redis.from_url(
        config["REDIS_URL"],
        decode_responses=True,
        socket_timeout=config["REDIS_SOCKET_TIMEOUT"],
        socket_connect_timeout=config["REDIS_CONNECT_TIMEOUT"],
    )


def init_redis(app, client=None):
    if client is None:
        client = build_redis_client(app.config)
    app.extensions["redis"] = client
    return client


def get_redis_client():
    return current_app.extensions["redis"]
