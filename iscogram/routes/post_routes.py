from flask import Blueprint, Response, abort, current_app, render_template, request

from iscogram.routes.helpers import (
    csrf_protected,
    get_csrf_token,
    get_flash,
    get_session_user,
    login_required,
    redirect_to,
    set_flash,
)
from iscogram.services import post_service


post_bp = Blueprint("posts", __name__)


@post_bp.route("/", methods=["GET"])
def index():
    me = get_session_user()
    csrf_token = get_csrf_token()
    posts = post_service.get_index_posts(csrf_token)

    return render_template(
        "index.html",
        posts=posts,
        me=me,
        csrf_token=csrf_token,
        flash=get_flash(),
    )


@post_bp.route("/", methods=["POST"])
@login_required()
@csrf_protected
def create_post():
    me = get_session_user()

    try:
        post_id = post_service.create_post(
            me["id"],
            request.files.get("file"),
            request.form.get("body", ""),
        )
    except post_service.UploadRejected as e:
        set_flash(str(e))
        return redirect_to("/")

    current_app.logger.info("User %s created post %s", me["id"], post_id)
    return redirect_to(f"/posts/{post_id}")


@post_bp.route("/posts", methods=["GET"])
def list_posts():
    max_created_at = request.args.get("max_created_at", "")
    if not max_created_at:
        return Response(status=200)

    try:
        before = post_service.parse_max_created_at(max_created_at)
    except ValueError:
        return Response(status=400)

    posts = post_service.get_posts_before(before, get_csrf_token())
    if not posts:
        abort(404)

    return render_template("posts.html", posts=posts)


@post_bp.route("/posts/<int:post_id>", methods=["GET"])
def get_post(post_id):
    post = post_service.get_post(post_id, get_csrf_token())
    if post is None:
        abort(404)

    return render_template("post_id.html", post=post, me=get_session_user())


@post_bp.route("/image/<int:post_id>.<ext>", methods=["GET"])
def get_image(post_id, ext):
    image = post_service.get_image(post_id, ext)
    if image is None:
        abort(404)

    mime, data = image
    return Response(data, status=200, mimetype=mime)
