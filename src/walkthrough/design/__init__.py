"""Pure (Qt-free) layout helpers for walkthrough visuals."""
