"""
Recognition Kernel

Shared infrastructure for the cost-recognition engine:
- Typed, coded exceptions
- Structured JSON logging
- Declarative base, engine and session handling
- Money types and the sanctioned rounding function
- Injectable clock and calendar/period arithmetic
"""

__version__ = "0.1.0"
