"""Input and output helpers for reading project files and writing artifacts."""
