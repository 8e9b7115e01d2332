"""Qt views: highlight overlay and the interactive tutorial panel."""
