"""
Utility modules for platform probes, logging, threading and terminal output.
"""
