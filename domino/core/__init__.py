"""Qt-free building blocks: geometry, degrees, hit testing, settings."""
