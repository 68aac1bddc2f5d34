"""Domain Events related to dispatching catalog requests.

Examples include events for when calls are deferred by the quota, retried
after throttling, fail, or succeed.
"""

from dataclasses import dataclass, field
import time
from typing import Optional

@dataclass
class DomainEvent:
    """Base class for domain events."""
    pass

# --- Specific API Events ---

@dataclass
class RequestInitiated(DomainEvent):
    """Event triggered right before a request is handed to the transport."""
    operation: str
    attempt_number: int
    timestamp: float = field(default_factory=time.time)

@dataclass
class RequestSucceeded(DomainEvent):
    """Event triggered when a request returned a success status and decoded."""
    operation: str
    latency_ms: float
    remaining_quota: Optional[int] = None
    timestamp: float = field(default_factory=time.time)

@dataclass
class RequestFailed(DomainEvent):
    """Event triggered when a request fails definitively (not retried)."""
    operation: str
    error_type: str
    error_message: str
    status_code: Optional[int] = None
    timestamp: float = field(default_factory=time.time)

@dataclass
class RequestDeferred(DomainEvent):
    """Event triggered when a request waits for the rate-limit window to reset."""
    operation: str
    wait_time_seconds: float
    timestamp: float = field(default_factory=time.time)

@dataclass
class RetryScheduled(DomainEvent):
    """Event triggered when a throttled (429) request will be retried."""
    operation: str
    attempt_number: int
    delay_seconds: float
    timestamp: float = field(default_factory=time.time)

@dataclass
class RetriesExhausted(DomainEvent):
    """Event triggered when every allowed attempt was throttled."""
    operation: str
    attempts: int
    timestamp: float = field(default_factory=time.time)
