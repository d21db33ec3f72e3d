"""
cmdwin - command palette for running named commands by search
"""

__version__ = "0.1.0"
