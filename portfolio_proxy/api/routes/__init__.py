"""api routers"""
