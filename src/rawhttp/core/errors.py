"""
Transport failure type.
"""


class TransportError(ConnectionError):
    """
    Raised when the connection cannot be opened or fails mid-exchange.

    Covers refused connections, DNS failures, TLS handshake failures,
    resets and timeouts. The original exception is chained as
    ``__cause__``.
    """

    def __init__(self, message: str, host: str = "", port: int = 0):
        super().__init__(message)
        self.host = host
        self.port = port

    def __str__(self) -> str:
        message = super().__str__()
        if self.host:
            return f"{message} ({self.host}:{self.port})"
        return message
