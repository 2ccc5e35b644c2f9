"""Channel adapter registry: pluggable notification dispatch channels.

Provides singleton access to channel adapters. The email adapter is chosen
by ``NOTIFICATION_EMAIL_ADAPTER``; only the in-memory ``fake`` adapter is
bundled, real providers plug in behind ``EmailPort``.
"""

import os

from notifications.types import NotificationChannel

_channel_instances: dict[str, object] = {}


def _email_adapter():
    adapter_name = os.getenv("NOTIFICATION_EMAIL_ADAPTER", "fake").lower()
    if adapter_name == "fake":
        from notifications.channel.fake_email import FakeEmailAdapter

        return FakeEmailAdapter()
    raise ValueError(f"Unknown email adapter: {adapter_name}")


def get_channel(channel_type: str):
    """Return the configured channel adapter (singleton per channel type)."""
    if channel_type not in _channel_instances:
        if channel_type == NotificationChannel.EMAIL.value:
            _channel_instances[channel_type] = _email_adapter()
        else:
            raise ValueError(f"Unknown channel type: {channel_type}")

    return _channel_instances[channel_type]


def reset_channels():
    """Reset all channel singletons (useful for testing)."""
    _channel_instances.clear()
