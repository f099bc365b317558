"""ClipMaster clipboard history engine"""

__version__ = "1.0.0"
