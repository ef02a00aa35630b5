"""
Chat protocol handling.

- **message_parser.py**: Raw line to ParsedMessage.
- **irc_connection.py**: asyncio stream connection to the chat server.
"""
