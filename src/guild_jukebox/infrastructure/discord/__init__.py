"""Discord integration: bot, cogs and port adapters."""
