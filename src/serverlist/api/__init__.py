"""
HTTP application for the server list API
"""
