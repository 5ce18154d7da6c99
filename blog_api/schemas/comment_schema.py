from blog_api.extensions.extensions import ma


class CommentResponseSchema(ma.Schema):
    id = ma.Int()
    post_id = ma.Int()
    user_id = ma.Int()
    text = ma.Str()
    created_at = ma.DateTime()


comment_schema = CommentResponseSchema()
