"""Services layer: model gateway, search providers and the thinking agent."""
