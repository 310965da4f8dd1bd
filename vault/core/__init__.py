"""
Core utilities shared across the vault app.

This package hosts:
- configuration helpers (env vars, paths, storage backend)
- cross-cutting helpers such as logging, CSRF, notifications and
  page rendering (theme, templates)

Routers and services depend on these primitives instead of reading
os.environ or cookies directly.
"""
