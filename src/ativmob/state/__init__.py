"""State layer.

Single source of truth for the UI snapshot and for how concurrent
operations merge their results into it.
"""

from ativmob.state.broadcast import Broadcaster, DeliveryPolicy, Subscription
from ativmob.state.store import StateContainer

__all__ = ["Broadcaster", "DeliveryPolicy", "StateContainer", "Subscription"]
