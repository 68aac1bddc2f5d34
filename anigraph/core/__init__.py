"""Core Layer: the consumer-facing catalog client and the result pager."""
