"""Core whitelist components: cache, scheduler, access gate, configuration."""
