"""Infrastructure Layer.

Concrete implementations of the domain ports (transport, user interface)
plus the request orchestration, GraphQL catalog, configuration and logging.
"""
