from .exec import exec_command

__all__ = ["exec_command"]
