"""Record a coin's spot price and report the historically cheapest minutes to buy."""

__version__ = "0.1.0"
