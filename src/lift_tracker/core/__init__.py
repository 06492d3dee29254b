"""Pure computation core: calendar weeks, streak and adherence engines."""
