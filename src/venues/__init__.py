"""
Coinbase Pro venue: request construction, signing and the HTTP client.

request_builder turns operations into (method, request_path, body),
coinbase_auth signs them, coinbase_pro_client sends them and decodes the
responses.
"""
