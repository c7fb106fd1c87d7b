from __future__ import annotations


class TenorGrabError(Exception):
    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


class ConfigError(TenorGrabError):
    pass


class TransportError(TenorGrabError):
    pass


class SchemaError(TenorGrabError):
    pass


class DeliveryError(TenorGrabError):
    pass


class SelectionError(TenorGrabError):
    pass
