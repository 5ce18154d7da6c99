from datetime import datetime

from blog_api.db import db


class Post(db.Model):
    __tablename__ = "posts"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = db.Column(db.String(255), nullable=False)
    excerpt = db.Column(db.Text, nullable=True)
    body = db.Column(db.Text, nullable=False)
    image_url = db.Column(db.String(500), nullable=True)
    slug = db.Column(db.String(255), unique=True, nullable=False)
    published = db.Column(db.Boolean, default=False, nullable=False, index=True)
    views = db.Column(db.Integer, default=0, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = db.Column(
        db.DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    # Rows are removed by the database cascade when the post goes away.
    tag_links = db.relationship(
        "PostTag",
        order_by="PostTag.position",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )

    @property
    def tags(self):
        return [link.tag for link in self.tag_links]

    def set_tags(self, tags):
        existing = {link.tag: link for link in self.tag_links}
        links = []
        for position, tag in enumerate(tags):
            link = existing.get(tag) or PostTag(tag=tag)
            link.position = position
            links.append(link)
        self.tag_links = links


class PostTag(db.Model):
    __tablename__ = "post_tags"

    post_id = db.Column(
        db.Integer,
        db.ForeignKey("posts.id", ondelete="CASCADE"),
        primary_key=True,
    )
    tag = db.Column(db.String(50), primary_key=True)
    position = db.Column(db.Integer, nullable=False, default=0)
