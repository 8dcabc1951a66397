"""NACHA fixed-width file codec."""

from payrails.nacha.formatter import NachaFormatter

__all__ = ["NachaFormatter"]
