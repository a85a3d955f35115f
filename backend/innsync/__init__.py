"""
InnSync - property management backend for small Indonesian hotels
"""
__version__ = "1.0.0"
