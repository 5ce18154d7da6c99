from blog_api.models.user_model import User
from blog_api.models.post_model import Post, PostTag
from blog_api.models.comment_model import Comment
from blog_api.models.like_model import Like

__all__ = ["User", "Post", "PostTag", "Comment", "Like"]
