"""E4000 and FC0012 tuner drivers, EEPROM image helpers and a dongle catalog for RTL2832 SDR dongles."""

__version__ = "0.1.0"