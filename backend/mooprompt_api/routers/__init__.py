"""
API routers grouped by area: public, auth, pos and flow.
"""
