"""Network probes used by leaf checks."""

import smtplib
import socket
import ssl
from dataclasses import dataclass

DEFAULT_TLS_TIMEOUT = 5.0
DEFAULT_SMTP_TIMEOUT = 5.0


@dataclass
class ProbeResult:
    """Outcome of a single probe run."""

    ok: bool
    reason: str = ""


def split_address(address: str) -> tuple[str, int]:
    """Split a ``host:port`` address into its parts.

    IPv6 hosts must be enclosed in brackets, e.g. ``[::1]:443``.

    Raises:
        ValueError: If the address has no host or no valid port

    """
    host, sep, port_text = address.strip().rpartition(":")
    if not sep or not host:
        error_msg = f"Address must be in host:port form: {address!r}"
        raise ValueError(error_msg)

    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    elif ":" in host:
        error_msg = f"IPv6 addresses must be enclosed in brackets: {address!r}"
        raise ValueError(error_msg)

    try:
        port = int(port_text)
    except ValueError as e:
        error_msg = f"Invalid port in address {address!r}"
        raise ValueError(error_msg) from e
    if not 0 < port < 65536:  # noqa: PLR2004
        error_msg = f"Port out of range in address {address!r}"
        raise ValueError(error_msg)

    return host, port


class TlsProbe:
    """Connects to an address and completes a TLS handshake."""

    def __init__(
        self,
        address: str,
        insecure: bool = False,
        timeout: float = DEFAULT_TLS_TIMEOUT,
    ) -> None:
        """Initialize the probe.

        Args:
            address: Target in host:port form
            insecure: Skip certificate and hostname verification
            timeout: Timeout in seconds for connect and handshake

        """
        self.address = address
        self.host, self.port = split_address(address)
        self.insecure = insecure
        self.timeout = timeout

    def _create_context(self) -> ssl.SSLContext:
        context = ssl.create_default_context()
        if self.insecure:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        return context

    def run(self) -> ProbeResult:
        """Perform the handshake and report the outcome."""
        context = self._create_context()
        try:
            with (
                socket.create_connection((self.host, self.port), timeout=self.timeout) as sock,
                context.wrap_socket(sock, server_hostname=self.host),
            ):
                pass
        except (OSError, UnicodeError) as e:
            # Hostnames the idna codec rejects fail in getaddrinfo with UnicodeError
            return ProbeResult(ok=False, reason=str(e) or type(e).__name__)
        return ProbeResult(ok=True)


class SmtpProbe:
    """Connects to an SMTP server and waits for its greeting."""

    def __init__(self, address: str, timeout: float = DEFAULT_SMTP_TIMEOUT) -> None:
        """Initialize the probe.

        Args:
            address: Target in host:port form
            timeout: Timeout in seconds for connect and greeting

        """
        self.address = address
        self.host, self.port = split_address(address)
        self.timeout = timeout

    def run(self) -> ProbeResult:
        """Open the connection and report the outcome."""
        try:
            client = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
        except (OSError, UnicodeError) as e:
            # smtplib.SMTPException is an OSError subclass
            return ProbeResult(ok=False, reason=str(e) or type(e).__name__)
        client.close()
        return ProbeResult(ok=True)
