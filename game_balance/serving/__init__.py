"""
API Serving Module
"""
