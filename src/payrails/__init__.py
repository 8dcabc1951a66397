"""payrails — payment rail selection and NACHA file handling."""

__version__ = "0.1.0"
