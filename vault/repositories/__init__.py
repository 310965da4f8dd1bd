"""
Persistence adapters.

kv_store holds the string key-value backends (JSON file or SQL table);
user_repository reads and rewrites the whole user list on top of it.
Services depend on these rather than touching the store directly.
"""
