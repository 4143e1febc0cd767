"""
WebSocket gateway forwarding Redis events to connected screens.
"""
