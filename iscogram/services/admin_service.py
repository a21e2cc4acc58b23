from iscogram.repositories import user_repository


def list_bannable_users():
    return [user.to_dict() for user in user_repository.list_bannable_users()]


def ban_users(raw_ids) -> int:
    user_ids = []
    for raw in raw_ids:
        try:
            user_ids.append(int(raw))
        except (TypeError, ValueError):
            continue
    return user_repository.ban_users(user_ids)
