"""Small-Talk: real-time room chat relay with voice message references."""
