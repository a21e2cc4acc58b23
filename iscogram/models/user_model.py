from datetime import datetime

from iscogram.db import db


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    account_name = db.Column(db.String(64), unique=True, nullable=False)
    passhash = db.Column(db.String(128), nullable=False)
    authority = db.Column(db.Integer, nullable=False, default=0)
    del_flg = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "account_name": self.account_name,
            "authority": self.authority,
            "del_flg": self.del_flg,
            "created_at": self.created_at,
        }
