"""Bot text commands (``!trigger`` lookup and definition)."""
