"""
REST API Module
"""
