"""Build a portable fio binary distribution for Enterprise Linux hosts."""

__version__ = "0.1.0"
