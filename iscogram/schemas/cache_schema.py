from iscogram.extensions.extensions import ma


class UserCacheSchema(ma.Schema):
    id = ma.Int(required=True)
    account_name = ma.Str(required=True)
    authority = ma.Int()
    del_flg = ma.Int()
    created_at = ma.DateTime(allow_none=True)


class CommentCacheSchema(ma.Schema):
    id = ma.Int(required=True)
    post_id = ma.Int(required=True)
    user_id = ma.Int(required=True)
    comment = ma.Str()
    created_at = ma.DateTime(allow_none=True)
    user = ma.Nested(UserCacheSchema, allow_none=True)


user_cache_schema = UserCacheSchema()
comments_cache_schema = CommentCacheSchema(many=True)
