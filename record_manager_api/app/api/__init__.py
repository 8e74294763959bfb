"""
API package containing versioned routes.

Versions live in subpackages such as ``v1``, each exposing a top-level
``router``.  Shared pieces used by every version sit next to them:
``deps`` builds services for route handlers and ``responses`` turns
service outcomes into enveloped HTTP responses.
"""
