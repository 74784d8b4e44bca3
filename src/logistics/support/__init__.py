"""Support desk abstraction — where organizations' delivery problems are escalated."""

import os

_support_desk_instance = None


def get_support_desk():
    """Return the configured support desk adapter (singleton).

    Uses FakeSupportDesk by default. In production, configure via the
    SUPPORT_DESK_ADAPTER environment variable.
    """
    global _support_desk_instance
    if _support_desk_instance is None:
        adapter = os.environ.get("SUPPORT_DESK_ADAPTER", "fake")
        if adapter == "fake":
            from logistics.support.fake_adapter import FakeSupportDesk

            _support_desk_instance = FakeSupportDesk()
        else:
            raise ValueError(f"Unknown support desk adapter: {adapter}")
    return _support_desk_instance


def reset_support_desk():
    """Reset the support desk singleton (useful for testing)."""
    global _support_desk_instance
    _support_desk_instance = None
