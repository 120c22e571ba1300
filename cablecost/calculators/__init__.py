"""
Cable calculation engine.

Pure Python math, no I/O. Given a cable construction (cores, sheath
groups, process entries) produce dimensions, weights and costs.
Reference data such as material types and rod prices is passed in.
"""
