from iscogram.repositories import comment_repository, post_repository, user_repository
from iscogram.services.post_service import get_hydrator


def get_profile(account_name: str, csrf_token: str):
    # Banned accounts stay reachable here; only the feeds filter del_flg.
    user = user_repository.get_by_account_name(account_name)
    if user is None:
        return None

    rows = post_repository.list_rows_by_user(user.id)
    posts = get_hydrator().hydrate(rows, csrf_token, all_comments=False)

    post_ids = post_repository.list_ids_by_user(user.id)

    return {
        "user": user.to_dict(),
        "posts": posts,
        "post_count": len(post_ids),
        "comment_count": comment_repository.count_by_user(user.id),
        "commented_count": comment_repository.count_on_posts(post_ids),
    }
