"""
Channel state for chatmod.

- **channel_state.py**: ChannelStateStore, the only owner of per-channel
  configuration and trust state.
- **rw_lock.py**: Reader/writer lock guarding the store.
"""
