"""
HTTP API for the placement optimizer.
"""
