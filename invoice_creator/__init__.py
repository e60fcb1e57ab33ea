"""Invoice and quote composer for mobile mechanics"""

__version__ = "1.0.0"
