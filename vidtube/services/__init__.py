"""Business logic: tokens, media, email, joined read views."""
