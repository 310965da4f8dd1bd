"""
Use cases of the vault app.

Each service module orchestrates the user repository to implement business
rules (sign up, log in, add/delete items, purchases, funds, PDF export).
Routers call these services instead of manipulating the store or the
session keys directly.
"""
