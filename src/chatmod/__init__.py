"""
chatmod - first-message moderation and text commands for IRC-style chat

chatmod joins one or more channels of a line-oriented chat server (Twitch IRC
by default) and reacts to every chat line it receives.

Core Components:

- **Message Parsing**: Turns raw protocol lines into immutable
  :class:`~chatmod.datatypes.chat_datatypes.ParsedMessage` values
- **Channel State**: Concurrency-safe registry of per-channel known users,
  bot admins, text commands and command blacklists
- **Moderation**: Times out first-time senders that post links or zalgo text;
  clean first messages promote the sender to a known user
- **Text Commands**: Owners and bot admins define ``!trigger reply`` commands
  that anyone can look up, minus a blacklist of reserved triggers

Usage:
    from chatmod.main import main
    main()  # Connects, joins the configured channels and runs until SIGINT
"""
