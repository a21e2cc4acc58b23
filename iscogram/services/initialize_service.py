from sqlalchemy import text

from iscogram.db import db
from iscogram.services import image_store


SEED_MAX_USER_ID = 1000
SEED_MAX_POST_ID = 10000
SEED_MAX_COMMENT_ID = 100000
BANNED_USER_MODULUS = 50

RESET_STATEMENTS = (
    f"DELETE FROM users WHERE id > {SEED_MAX_USER_ID}",
    f"DELETE FROM posts WHERE id > {SEED_MAX_POST_ID}",
    f"DELETE FROM comments WHERE id > {SEED_MAX_COMMENT_ID}",
    "UPDATE users SET del_flg = 0",
    f"UPDATE users SET del_flg = 1 WHERE id % {BANNED_USER_MODULUS} = 0",
)


def initialize():
    """Reset the store to the benchmark's seed state."""
    for statement in RESET_STATEMENTS:
        db.session.execute(text(statement))
    db.session.commit()

    image_store.prune_mirror(SEED_MAX_POST_ID)
