"""File -> streaming ingestion loader.

Reads a delimited text file line by line, submits each well-shaped line as a
row to a streaming ingestion channel and waits until the backend reports the
last offset token as committed.
"""

__version__ = "0.1.0"
