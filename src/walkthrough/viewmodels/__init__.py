"""Qt-free view models for walkthrough views."""
