"""
HTTP layer for MathSnap (FastAPI).
"""
