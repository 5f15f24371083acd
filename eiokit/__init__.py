"""Engine.IO framing, packet and payload codecs with room broadcasting helpers."""

__version__ = "0.1.0"