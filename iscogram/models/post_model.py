from datetime import datetime

from iscogram.db import db


class Post(db.Model):
    __tablename__ = "posts"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    mime = db.Column(db.String(64), nullable=False)
    imgdata = db.Column(db.LargeBinary(length=(2 ** 32) - 1), nullable=False)
    body = db.Column(db.Text, nullable=False)
    created_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, index=True
    )

    def to_dict(self, user=None):
        # imgdata is served by the image route only
        return {
            "id": self.id,
            "user_id": self.user_id,
            "body": self.body,
            "mime": self.mime,
            "created_at": self.created_at,
            "user": user.to_dict() if user is not None else None,
        }
