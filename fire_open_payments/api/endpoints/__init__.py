"""
HTTP endpoints a host application can mount.
"""
