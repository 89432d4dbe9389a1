"""
Generic utilities shared across modules (clock abstraction).
"""
