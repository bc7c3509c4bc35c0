"""MindWork wellbeing tracking API."""
