from blog_api.extensions.extensions import ma


class LikerSchema(ma.Schema):
    user_id = ma.Int()
    user_name = ma.Str()
    user_avatar = ma.Str()
    created_at = ma.DateTime()


liker_schema = LikerSchema()
