"""Path planning building blocks for micro aerial vehicles: trajectory points, yaw policies, resampling, particle search, goal selection and planning panel state."""

__version__ = "0.1.0"