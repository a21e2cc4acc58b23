from functools import wraps

from flask import Response, current_app, g, redirect, request, session

from iscogram.extensions.cache import get_cache
from iscogram.services.session_service import SessionResolver, is_login


def get_session_user():
    if "me" not in g:
        g.me = SessionResolver(get_cache()).current_user(session)
    return g.me


def get_csrf_token() -> str:
    return session.get("csrf_token", "")


def get_flash(key: str = "notice") -> str:
    return session.pop(key, None) or ""


def set_flash(message: str, key: str = "notice"):
    session[key] = message


def login_session(user_id: int, csrf_token: str):
    # a bag written before login (a flash notice) must not keep its id
    current_app.session_interface.regenerate(session)
    session["user_id"] = user_id
    session["csrf_token"] = csrf_token


def redirect_to(location: str):
    return redirect(location, code=302)


def login_required(redirect_location="/login"):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if not is_login(get_session_user()):
                return redirect_to(redirect_location)
            return view(*args, **kwargs)
        return wrapper
    return decorator


def csrf_protected(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if request.form.get("csrf_token", "") != get_csrf_token():
            return Response(status=422)
        return view(*args, **kwargs)
    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if get_session_user().get("authority", 0) == 0:
            return Response(status=403)
        return view(*args, **kwargs)
    return wrapper
