"""
Request Signer
Builds the authenticated envelope for private Gemini endpoints
"""

import base64
import hashlib
import hmac
import json
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .errors import DataParsingError


@dataclass(frozen=True)
class SignedPayload:
    """Base64 payload, its hex HMAC-SHA384 signature and the JSON it encodes"""
    payload: str
    signature: str
    body_json: bytes
    nonce: str


def generate_nonce() -> str:
    """Nanosecond epoch timestamp as a decimal string"""
    return str(time.time_ns())


def _is_empty(value: Any) -> bool:
    return value is None or value is False or value == "" or value == [] or value == {}


class RequestSigner:
    """
    Gemini request signer

    The envelope (request path, nonce and request fields) is serialized to
    compact JSON, base64-encoded, and the base64 string itself is both sent
    in a header and fed to HMAC-SHA384. Empty optional fields are dropped so
    the same field set always yields the same bytes.
    """

    API_KEY_HEADER = 'X-GEMINI-APIKEY'
    PAYLOAD_HEADER = 'X-GEMINI-PAYLOAD'
    SIGNATURE_HEADER = 'X-GEMINI-SIGNATURE'

    @staticmethod
    def build_envelope(endpoint: str, fields: Optional[Dict[str, Any]], nonce: str) -> Dict[str, Any]:
        """Stamp request path and nonce, then append the non-empty fields"""
        envelope: Dict[str, Any] = {'request': endpoint, 'nonce': nonce}
        for key, value in (fields or {}).items():
            if key in envelope or _is_empty(value):
                continue
            envelope[key] = value
        return envelope

    @staticmethod
    def encode(envelope: Dict[str, Any]) -> bytes:
        """
        Serialize the envelope to compact JSON

        Raises:
            DataParsingError: a field is not JSON serializable
        """
        try:
            return json.dumps(envelope, separators=(',', ':'), allow_nan=False).encode('utf-8')
        except (TypeError, ValueError) as e:
            raise DataParsingError("failed to marshal request payload", cause=e) from e

    @staticmethod
    def compute_signature(secret: str, payload: str) -> str:
        """Hex HMAC-SHA384 of the base64 payload keyed by the account secret"""
        return hmac.new(
            secret.encode('utf-8'),
            payload.encode('utf-8'),
            hashlib.sha384
        ).hexdigest()

    def sign(self, secret: str, endpoint: str, fields: Optional[Dict[str, Any]] = None,
             nonce: Optional[str] = None) -> SignedPayload:
        """
        Sign a private request

        Args:
            secret: Account API secret
            endpoint: API path, e.g. '/v1/order/new' (also the signed 'request' field)
            fields: Request-specific fields
            nonce: Explicit nonce (defaults to the current time in nanoseconds)

        Returns:
            SignedPayload with the base64 payload and hex signature
        """
        nonce = nonce or generate_nonce()
        body_json = self.encode(self.build_envelope(endpoint, fields, nonce))
        payload = base64.b64encode(body_json).decode('ascii')
        return SignedPayload(
            payload=payload,
            signature=self.compute_signature(secret, payload),
            body_json=body_json,
            nonce=nonce,
        )

    def build_headers(self, api_key: str, signed: SignedPayload) -> Dict[str, str]:
        """
        Headers for a private call; the payload travels in headers and the body stays empty

        Args:
            api_key: Account API key
            signed: Result of sign()

        Returns:
            Header mapping
        """
        return {
            self.API_KEY_HEADER: api_key,
            self.PAYLOAD_HEADER: signed.payload,
            self.SIGNATURE_HEADER: signed.signature,
            'Content-Type': 'text/plain',
            'Content-Length': '0',
            'Cache-Control': 'no-cache',
        }
