"""Encrypted, time-boxed tokens for emailed links.

A token is never stored. It is the AES-256-CBC encryption of
``{"sub", "purpose", "iat"}`` under the server key, with a fresh random IV
per token; the IV travels next to the ciphertext in the link. Redemption
decrypts, checks the purpose, and compares the age against the window
configured for that purpose.
"""

import json
import logging
import os
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from vidtube.config import Settings
from vidtube.constants import ActionTokenPurpose
from vidtube.errors import ActionTokenExpiredError, ActionTokenInvalidError

logger = logging.getLogger(__name__)

IV_SIZE = 16


@dataclass(frozen=True)
class ActionToken:
    """Hex-encoded IV and ciphertext; both are needed to redeem."""

    iv: str
    token: str


class ActionTokenService:
    """Issues and redeems verification and password-reset tokens."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        try:
            self._key = bytes.fromhex(settings.action_token_key)
        except ValueError as e:
            raise ValueError("action_token_key must be hex encoded") from e
        if len(self._key) != 32:
            raise ValueError("action_token_key must decode to 32 bytes (AES-256)")

    def window(self, purpose: str) -> timedelta:
        """How long a token for ``purpose`` stays redeemable."""
        if purpose == ActionTokenPurpose.VERIFY_EMAIL:
            return timedelta(hours=self._settings.email_verification_expire_hours)
        if purpose == ActionTokenPurpose.RESET_PASSWORD:
            return timedelta(minutes=self._settings.password_reset_expire_minutes)
        raise ValueError(f"Unknown action token purpose: {purpose}")

    def issue(
        self, user_id: str, purpose: str, issued_at: datetime | None = None
    ) -> ActionToken:
        """Encrypt a token for ``user_id`` limited to ``purpose``."""
        self.window(purpose)  # reject unknown purposes early
        issued_at = issued_at or datetime.now(UTC)
        payload = json.dumps(
            {"sub": user_id, "purpose": purpose, "iat": issued_at.timestamp()}
        ).encode("utf-8")

        iv = os.urandom(IV_SIZE)
        padder = padding.PKCS7(algorithms.AES.block_size).padder()
        padded = padder.update(payload) + padder.finalize()
        encryptor = Cipher(algorithms.AES(self._key), modes.CBC(iv)).encryptor()
        ciphertext = encryptor.update(padded) + encryptor.finalize()
        return ActionToken(iv=iv.hex(), token=ciphertext.hex())

    def redeem(self, token: ActionToken, purpose: str, now: datetime | None = None) -> str:
        """Return the user id the token was issued for.

        Raises:
            ActionTokenInvalidError: Undecryptable, malformed, or wrong purpose.
            ActionTokenExpiredError: Older than the window for ``purpose``.
        """
        payload = self._decrypt(token)

        user_id = payload.get("sub")
        issued_ts = payload.get("iat")
        if not isinstance(user_id, str) or not isinstance(issued_ts, int | float):
            raise ActionTokenInvalidError()
        if payload.get("purpose") != purpose:
            logger.warning(f"Action token purpose mismatch: expected {purpose}")
            raise ActionTokenInvalidError()

        now = now or datetime.now(UTC)
        issued_at = datetime.fromtimestamp(issued_ts, UTC)
        if now - issued_at > self.window(purpose):
            raise ActionTokenExpiredError()
        return user_id

    def _decrypt(self, token: ActionToken) -> dict:
        try:
            iv = bytes.fromhex(token.iv)
            ciphertext = bytes.fromhex(token.token)
        except ValueError as e:
            raise ActionTokenInvalidError() from e
        if len(iv) != IV_SIZE or not ciphertext or len(ciphertext) % IV_SIZE:
            raise ActionTokenInvalidError()

        decryptor = Cipher(algorithms.AES(self._key), modes.CBC(iv)).decryptor()
        unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
        try:
            padded = decryptor.update(ciphertext) + decryptor.finalize()
            plaintext = unpadder.update(padded) + unpadder.finalize()
            payload = json.loads(plaintext.decode("utf-8"))
        except (ValueError, UnicodeDecodeError) as e:
            raise ActionTokenInvalidError() from e

        if not isinstance(payload, dict):
            raise ActionTokenInvalidError()
        return payload
