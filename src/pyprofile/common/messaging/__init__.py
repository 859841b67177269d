from .bus import MessageBus, Renderer, bus

__all__ = ["MessageBus", "bus", "Renderer"]
