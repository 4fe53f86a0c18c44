"""Message and voice activity counters for Discord guilds."""
