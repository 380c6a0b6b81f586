#!/usr/bin/env python3
"""
Shared constants for the Orrery (render-space units unless stated otherwise).

Keeping constants in one place helps ensure values are consistent across the
codebase and makes tuning easier.
"""
import math

TWO_PI = 2.0 * math.pi

# Scaling from catalog units to render space
DIAMETER_LOG_OFFSET = 3.0  # log10(km)
DIAMETER_FACTOR = 0.5
ORBITAL_RADIUS_LOG_OFFSET = 1.2  # log10(10^6 km)
ORBITAL_RADIUS_FACTOR = 7.0
ANGULAR_RATE_FACTOR = 10.0

# The satellite orbits a planet, not the central body, so it is scaled linearly
SATELLITE_DIAMETER_DIVISOR = 20000.0  # km per render unit
SATELLITE_RADIUS_MULTIPLIER = 1.5
DEFAULT_SATELLITE_HOST_INDEX = 2  # third orbiting body in catalog order

# Axes
VERTICAL_AXIS = (0.0, 1.0, 0.0)
INCLINATION_AXIS = (1.0, 0.0, 0.0)

# Render payload material defaults
DEFAULT_DIFFUSE = (1.0, 1.0, 1.0, 0.0)
CENTRAL_BLEND = 1.0
ORBITING_BLEND = 0.5
TEXTURE_REPEAT_U = 1.0
TEXTURE_REPEAT_V = 1.0

# Simulation controls
DEFAULT_TIME_SCALE = 1.0  # simulation seconds per real second
STEP_DT = 1 / 60.0  # seconds advanced by a single manual step

# Rendering (viewport)
VIEW_WIDTH = 1100
VIEW_HEIGHT = 800
BACKGROUND_COLOR = (6, 8, 14)
ORBIT_COLOR = (60, 70, 95)
HUD_COLOR = (200, 200, 200)
ORBIT_RING_SEGMENTS = 96

# Camera zoom bounds (render units per pixel)
DEFAULT_UNITS_PER_PIXEL = 0.045
MIN_UNITS_PER_PIXEL = 1e-4
MAX_UNITS_PER_PIXEL = 5.0
DEFAULT_TILT = math.radians(35.0)

# Safety: avoid drawing outside reasonable integer pixel ranges
SAFE_COORD_LIMIT = 30000
