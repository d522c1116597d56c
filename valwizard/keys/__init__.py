"""Wallet handling, key derivation and the validator key store."""
