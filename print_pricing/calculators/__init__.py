"""
Add-on pricing calculators.

Pure Python math. One calculator per pricing model (FLAT, PERCENTAGE,
PER_UNIT, CUSTOM), dispatched through registry.get_addon_calculator().
"""
