"""Student Life Hub - local progression and session core"""

__version__ = "2.0.0"
