"""Budget aggregation and auto-generation engine."""
