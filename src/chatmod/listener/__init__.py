"""Inbound message handling that sequences parsing, moderation and commands."""
