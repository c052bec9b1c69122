"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations


class Unauthenticated(Exception):
    """No verified purchaser email accompanies the request."""


class InvalidOrderInput(Exception):
    """Contact details or order contents are missing or malformed."""


class InvalidOrderStatus(InvalidOrderInput):
    """Unknown status value, or a transition the state machine forbids."""


class OrderNotFound(Exception):
    """The requested order does not exist."""


class OrderAccessForbidden(Exception):
    """The requester is neither the purchaser nor acting as administrator."""
