from .settings import FieldRegisterMap, LogLevel, Parity, Settings

__all__ = ["FieldRegisterMap", "LogLevel", "Parity", "Settings"]
