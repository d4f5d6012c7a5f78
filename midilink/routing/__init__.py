"""Routing between endpoints and event dispatch."""

from midilink.routing.dispatcher import EventReceiver, on_events
from midilink.routing.router import ForwardingReceiver, route, unroute

__all__ = ["EventReceiver", "on_events", "ForwardingReceiver", "route", "unroute"]
