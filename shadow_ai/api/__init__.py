"""REST API for visualizing and controlling the simulation."""
