"""
Services Package

- symbol_directory: cached list of eligible trading pairs
- indicators: RSI computation
- classifier: RSI range lookup
- rsi_monitor: concurrent fan-out that buckets every pair by RSI
"""
