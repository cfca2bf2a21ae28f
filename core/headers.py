"""Header rewriting for forwarded requests."""

import httpx

VIA_PROTOCOL = "1.1"


class HeaderBuilder:
    """Rewrite hop headers on a private copy of the inbound headers."""

    def set_host_header(self, headers: httpx.Headers, endpoint: httpx.URL) -> None:
        """Point Host at the backend; the port is kept only when non-default."""
        headers["Host"] = endpoint.netloc.decode("ascii")

    def append_via_header(self, headers: httpx.Headers, received_by: str) -> None:
        """Record this hop, keeping the hops of earlier proxies."""
        hop = f"{VIA_PROTOCOL} {received_by}"
        existing = headers.get("via", "").strip()
        headers["Via"] = f"{existing}, {hop}" if existing else hop

    def build_forward_headers(
        self,
        headers: httpx.Headers,
        endpoint: httpx.URL,
        received_by: str,
    ) -> httpx.Headers:
        """Apply Host and Via rewriting.

        X-Forwarded-For is left alone: the hosting runtime has already set it.
        """
        self.set_host_header(headers, endpoint)
        self.append_via_header(headers, received_by)
        return headers
