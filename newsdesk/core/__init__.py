"""
Core Infrastructure.

Configuration, logging, exceptions and resilience helpers shared by the
client, services and web layers.
"""
