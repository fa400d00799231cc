"""Domain services: session coordination and turn recording.

Imported by the Socket.IO handlers and HTTP routes, keeping transport
concerns apart from the turn rules.
"""
