"""FX Converter: bidirectional currency conversion engine."""

__version__ = "0.1.0"
