"""A2A travel task orchestration core.

Typed agents registered with an orchestrator collaborate on travel
planning tasks (safety checks, flight search, hotel search) through
asynchronous message passing and task delegation.
"""

__version__ = "1.0.0"
