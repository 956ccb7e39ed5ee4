from spacetime.models.memory import Memory

__all__ = ["Memory"]
