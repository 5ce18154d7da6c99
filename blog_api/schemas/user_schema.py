from blog_api.extensions.extensions import ma


class UserSchema(ma.Schema):
    id = ma.Int()
    name = ma.Str()
    email = ma.Str()
    avatar_url = ma.Str()
    bio = ma.Str()
    created_at = ma.DateTime()


user_schema = UserSchema()
public_user_schema = UserSchema(exclude=("email",))
