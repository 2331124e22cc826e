"""Cast portal core.

Reservation projection, attendance state and revenue aggregation for the
staff ("cast") portal, organized by feature modules with a thin Flask
controller layer over service/repository layers.
"""
