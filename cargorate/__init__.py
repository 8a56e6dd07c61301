"""cargorate -- route segmentation and sector rate pricing for air-cargo records."""

__version__ = "0.1.0"
