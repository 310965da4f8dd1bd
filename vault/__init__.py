"""Pocket Vault: personal vault and wallet web app."""
