"""
API routers, one package per procedure group.
"""
