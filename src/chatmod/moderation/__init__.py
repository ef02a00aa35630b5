"""
Moderation for chatmod.

- **roles.py**: Pure role resolution (owner, mod, peasant) from channel config.
- **moderation_pipeline.py**: First-message link and zalgo rules that time
  out offending senders.
"""
