"""ROBS core: order, table and payment lifecycle engine"""

__version__ = "1.0.0"
