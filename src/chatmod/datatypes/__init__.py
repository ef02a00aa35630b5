"""
Value types shared across chatmod.

- **chat_datatypes.py**: Parsed chat messages, sender roles and protocol markers.
- **channel_config.py**: Declarative channel settings and the live per-channel
  configuration owned by the channel state store.
- **action_datatypes.py**: Sanction kinds and the timeout action sent to a channel.
"""
