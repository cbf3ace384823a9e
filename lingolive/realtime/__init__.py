"""Realtime connection handling.

Use explicit imports:
    from lingolive.realtime.router import ConnectionRouter
    from lingolive.realtime.hub import ConnectionHub
    from lingolive.realtime.agents import AgentRegistry
"""
