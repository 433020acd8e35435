"""
ORM mappings of the tables the janitor touches. The tables belong to the
instance software; the janitor never creates or migrates them.
"""

from .post import Post
