# utils.py

import hmac
import hashlib
import json
import logging
from typing import Optional
from urllib.parse import parse_qs

from errors import AuthenticationError

logger = logging.getLogger(__name__)

SIGNATURE_PREFIX = "sha256="
BRANCH_REF_PREFIX = "refs/heads/"


def compute_signature(request_body: bytes, secret: str) -> str:
    mac = hmac.new(secret.encode(), msg=request_body, digestmod=hashlib.sha256)
    return SIGNATURE_PREFIX + mac.hexdigest()


def verify_signature(request_body: bytes, signature: Optional[str], secret: str) -> bool:
    """
    Check an X-Hub-Signature-256 value against the raw request body.

    The digest is always computed over the bytes exactly as received.
    An empty secret disables verification entirely.
    """
    if not secret:
        logger.debug("Webhook secret is disabled. Skipping signature verification.")
        return True

    if not signature:
        logger.warning("No signature provided.")
        return False

    if not signature.startswith(SIGNATURE_PREFIX):
        logger.warning(f"Unsupported signature type: {signature.split('=')[0]}")
        return False

    expected = compute_signature(request_body, secret)
    is_valid = hmac.compare_digest(expected.encode(), signature.encode())
    if is_valid:
        logger.debug("Webhook signature verified successfully.")
    else:
        logger.warning("Webhook signature verification failed.")
    return is_valid


def require_valid_signature(request_body: bytes, signature: Optional[str], secret: str):
    if secret and not signature:
        logger.error("Missing X-Hub-Signature-256 header.")
        raise AuthenticationError("Missing signature header")
    if not verify_signature(request_body, signature, secret):
        raise AuthenticationError("Invalid signature")


def branch_from_ref(ref: str) -> str:
    if ref.startswith(BRANCH_REF_PREFIX):
        return ref[len(BRANCH_REF_PREFIX):]
    return ref


def decode_payload(body_bytes: bytes, content_type: str) -> dict:
    """
    Decode a webhook body sent either as JSON or as a form with a `payload` field.
    """
    if "application/x-www-form-urlencoded" in content_type:
        form_data = parse_qs(body_bytes.decode("utf-8"))
        if "payload" not in form_data:
            raise ValueError("No payload parameter in form data")
        return json.loads(form_data["payload"][0])
    return json.loads(body_bytes.decode("utf-8"))
