"""Swap request coordination."""

from .service import SwapCoordinator, coerce_decision

__all__ = ["SwapCoordinator", "coerce_decision"]
