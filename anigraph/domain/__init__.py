"""Domain layer: entities, value objects, ports and events.

Nothing in here performs I/O.
"""
