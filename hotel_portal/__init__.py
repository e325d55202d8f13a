"""Client for the hotel booking and web check-in API."""
