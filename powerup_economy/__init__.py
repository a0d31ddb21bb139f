"""
Powerup economy backend: catalog, purchase controller, ledgers and HTTP API
"""
