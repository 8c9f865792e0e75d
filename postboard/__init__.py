"""
Postboard - users, posts, and the auth layer that decides who may touch them.
"""

__version__ = "0.1.0"
