"""Group / tour rooms: member polling and location sharing."""

from .poller import MemberPoller
from .sharer import LocationSharer

__all__ = ["LocationSharer", "MemberPoller"]
