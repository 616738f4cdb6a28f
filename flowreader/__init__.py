"""flowreader: read-only query and analysis of the Wispr Flow dictation history."""

__version__ = '1.0.0'
