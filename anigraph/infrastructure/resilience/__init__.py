"""API Resilience Implementations.

Contains the rate-limit state tracked from response headers, the
cancellation token observed at every suspension point, and the dispatcher
that retries throttled calls within a fixed number of attempts.
Bounded Context: API Resilience
"""
