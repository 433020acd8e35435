"""
ORM for the 'post' table. Only the columns that the janitor reads or writes
are mapped.
"""

from .. import database as db


class Post(db.Base):
    """
    A piece of content on the instance, possibly carrying a thumbnail that is
    hosted on our pict-rs.
    """

    __tablename__ = "post"

    id = db.Column(db.Integer, primary_key=True)
    "The unique ID of this post."
    thumbnail_url = db.Column(db.Text, nullable=True)
    "Full URL of the thumbnail. Set to NULL once the thumbnail is cleaned up."
    published = db.Column(db.DateTime(timezone=True), nullable=False)
    "The time at which the post was published."
