__version__ = "0.1.0"
ctvgen_version = f"ctvgen {__version__}"
