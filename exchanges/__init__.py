"""
Exchange Connectors Package

Each exchange has its own subfolder with an api_client.py holding the
REST logic. Only Binance spot is wired in.
"""
