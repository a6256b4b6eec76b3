"""TaskFlow — task tracking API with stateless bearer-token auth.

Identity (register/login → JWT), per-request token verification, and
owner-scoped access to tasks. Every task belongs to exactly one user and
is invisible to everyone else.
"""

__version__ = "0.1.0"
