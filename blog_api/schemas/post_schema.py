from blog_api.extensions.extensions import ma


class PostSchema(ma.Schema):
    id = ma.Int()
    user_id = ma.Int()
    title = ma.Str()
    excerpt = ma.Str()
    body = ma.Str()
    image_url = ma.Str()
    slug = ma.Str()
    tags = ma.List(ma.Str())
    published = ma.Boolean()
    views = ma.Int()
    created_at = ma.DateTime()
    updated_at = ma.DateTime()


post_schema = PostSchema()
