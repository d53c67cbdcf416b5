"""Encoding and decoding of MQTT version 5 publish, acknowledgement and subscription packets."""

__version__ = "0.1.0"