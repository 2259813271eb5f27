"""State layer.

This package is the single owner of a device's current/target door
state. Decoded protocol events and hub requests are reconciled here
and nowhere else.
"""
