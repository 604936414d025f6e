"""Resolution layers: regular-DOM fallback, shadow piercing and form actions."""
