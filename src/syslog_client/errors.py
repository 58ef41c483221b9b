"""
Exceptions raised and reported by the syslog client
"""


class SyslogClientError(Exception):
    """Base class for every error the client reports"""


class InvalidArgument(SyslogClientError, TypeError):
    """Bad call-site input, raised synchronously before any I/O"""


class UnsupportedTransport(SyslogClientError):
    """The configured transport kind has no handle implementation"""


class ConnectFailed(SyslogClientError, ConnectionError):
    """Socket creation, bind, connect or handshake failure"""


class ConnectTimeout(ConnectFailed, TimeoutError):
    """TCP/TLS connection was not established within ``tcp_timeout``"""


class TlsValidationFailed(ConnectFailed):
    """Peer certificate was rejected by the configured trust anchors"""


class RemoteClosed(SyslogClientError):
    """The collector ended or reset the stream"""


class SendFailed(SyslogClientError):
    """Write or dispatch failure on an otherwise ready transport"""
