"""Domain types and rules (users, ledger, vault items, product catalog)."""
