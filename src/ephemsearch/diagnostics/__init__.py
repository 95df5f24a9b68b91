"""Diagnostics package.

- validate_provider: analytic model vs. JPL kernel residual plot
  (requires the diagnostics extras and a .bsp file)
"""

__all__ = ["validate_provider"]
