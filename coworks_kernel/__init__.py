"""
Coworks Kernel

Shared foundations for the coworking booking cost engine:
- Seating-type and currency value types
- Typed exceptions with machine-readable codes
- Structured JSON logging
"""

__version__ = "0.1.0"
