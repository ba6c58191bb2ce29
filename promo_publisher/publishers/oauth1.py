# promo_publisher/publishers/oauth1.py

"""OAuth 1.0a request signing (HMAC-SHA1) for the Twitter/X API.

Signing is delegated to ``oauthlib``, which only builds the
``Authorization`` header and never touches the network, so requests
still go out through the publishers' curl_cffi session.
"""

from collections.abc import Callable
from typing import Protocol
from urllib.parse import quote, urlencode

from oauthlib.oauth1 import SIGNATURE_HMAC, Client


class RequestSigner(Protocol):
    """Produces the ``Authorization`` header value for a request."""

    def authorization_header(
        self,
        method: str,
        url: str,
        params: dict[str, str] | None = None,
    ) -> str:
        ...


class OAuth1Signer:
    """HMAC-SHA1 OAuth 1.0a signer for user-context requests.

    *nonce_factory* and *clock* pin the nonce and timestamp; left unset,
    oauthlib generates fresh ones for every request.
    """

    def __init__(
        self,
        consumer_key: str,
        consumer_secret: str,
        token: str,
        token_secret: str,
        nonce_factory: Callable[[], str] | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.consumer_key = consumer_key
        self.consumer_secret = consumer_secret
        self.token = token
        self.token_secret = token_secret
        self._nonce_factory = nonce_factory
        self._clock = clock

    def client(self) -> Client:
        """An oauthlib client carrying this signer's credentials."""
        return Client(
            self.consumer_key,
            client_secret=self.consumer_secret,
            resource_owner_key=self.token,
            resource_owner_secret=self.token_secret,
            signature_method=SIGNATURE_HMAC,
            nonce=self._nonce_factory() if self._nonce_factory else None,
            timestamp=str(int(self._clock())) if self._clock else None,
        )

    def authorization_header(
        self,
        method: str,
        url: str,
        params: dict[str, str] | None = None,
    ) -> str:
        """Sign a request and return the ``OAuth ...`` header value.

        *params* are query/form parameters that take part in the
        signature but are not repeated in the header.  JSON bodies are
        never signed.
        """
        signed_url = url
        if params:
            signed_url = f"{url}?{urlencode(params, quote_via=quote)}"
        _, headers, _ = self.client().sign(
            signed_url, http_method=method.upper(),
        )
        return str(headers["Authorization"])
