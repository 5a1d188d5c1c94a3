"""
Payment gateway webhook endpoint and event handlers.
"""
