"""Route planner - parse GPX routes and compute legs, bearings and ETAs."""

__version__ = "0.1.0"
