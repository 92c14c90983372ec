"""
Core business logic package for the trip proposal engine.

Pricing, guest roster, per-person estimates and the status state machine.
The request layer calls into core/ and owns routing, auth and presentation.
"""

__all__: list[str] = []
