"""Small reusable widgets for the walkthrough views."""
