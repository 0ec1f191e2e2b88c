"""
pibuild - build-matrix driver and SD-card packager for Raspberry Pi firmware.
"""

__version__ = "0.1.0"
