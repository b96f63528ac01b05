"""TripCraft - AI trip itinerary planner."""
