"""
Application wiring: lifespan, CORS, middlewares and exception handlers.
"""
