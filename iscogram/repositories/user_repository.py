from iscogram.db import db
from iscogram.models.user_model import User


def get_by_id(user_id: int):
    return db.session.get(User, user_id)


def get_active_by_account_name(account_name: str):
    return User.query.filter_by(account_name=account_name, del_flg=0).first()


def get_by_account_name(account_name: str):
    return User.query.filter_by(account_name=account_name).first()


def account_name_exists(account_name: str) -> bool:
    return (
        db.session.query(User.id)
        .filter(User.account_name == account_name)
        .first()
        is not None
    )


def create_user(account_name, passhash, authority=0):
    user = User(
        account_name=account_name,
        passhash=passhash,
        authority=authority,
    )
    db.session.add(user)
    db.session.commit()
    return user


def list_bannable_users():
    return (
        User.query
        .filter(User.authority == 0, User.del_flg == 0)
        .order_by(User.created_at.desc(), User.id.desc())
        .all()
    )


def ban_users(user_ids) -> int:
    user_ids = list(user_ids)
    if not user_ids:
        return 0

    updated = (
        User.query
        .filter(User.id.in_(user_ids))
        .update({User.del_flg: 1}, synchronize_session=False)
    )
    db.session.commit()
    return updated
