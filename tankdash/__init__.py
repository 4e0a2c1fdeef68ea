"""
Water tank dashboard - polls a tank status endpoint and displays the fill level
"""
__version__ = '1.0.0'
