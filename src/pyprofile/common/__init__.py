from .messaging import bus, MessageBus, Renderer

__all__ = ["bus", "MessageBus", "Renderer"]
