from __future__ import annotations

import hmac
import logging
from typing import Protocol

import httpx
from tenacity import RetryCallState, retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from barberbook.config import Settings

logger = logging.getLogger(__name__)


class SecretVerifier(Protocol):
    def verify(self, supplied: str) -> bool: ...


class StaticSecretVerifier:
    """Compares against a secret the process knows.

    Anyone who can read the process configuration can read the secret too;
    use RemoteSecretVerifier when that matters.
    """

    def __init__(self, secret: str) -> None:
        self._secret = secret

    def verify(self, supplied: str) -> bool:
        return hmac.compare_digest(supplied.encode("utf-8"), self._secret.encode("utf-8"))


def _log_before_sleep(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome is not None else None
    sleep_seconds = getattr(retry_state.next_action, "sleep", 0.0)
    logger.info(
        "Operator check attempt %s failed (%s), retrying in %.0f sec.",
        retry_state.attempt_number,
        type(exc).__name__ if exc is not None else "unknown",
        sleep_seconds,
    )


class RemoteSecretVerifier:
    """Asks an HTTP endpoint whether the supplied secret is the operator's.

    The endpoint receives ``{"secret": ...}`` and answers ``{"ok": true}``
    for a match. Transport errors are retried; anything else is final.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout_seconds: float = 10.0,
        retry_attempts: int = 2,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.url = url
        self.timeout_seconds = timeout_seconds
        self.retry_attempts = retry_attempts
        self._transport = transport

    def _post(self, supplied: str) -> bool:
        with httpx.Client(timeout=self.timeout_seconds, transport=self._transport) as client:
            r = client.post(self.url, json={"secret": supplied})
            r.raise_for_status()
            data = r.json()
            return data.get("ok", False) is True

    def verify(self, supplied: str) -> bool:
        decorated = retry(
            stop=stop_after_attempt(self.retry_attempts),
            wait=wait_exponential(multiplier=1, min=1, max=4),
            retry=retry_if_exception_type(httpx.TransportError),
            before_sleep=_log_before_sleep,
            reraise=True,
        )(self._post)

        return decorated(supplied)


def build_verifier(settings: Settings) -> SecretVerifier:
    if settings.operator_auth_url:
        return RemoteSecretVerifier(
            settings.operator_auth_url,
            timeout_seconds=settings.auth_timeout_seconds,
            retry_attempts=settings.auth_retry_attempts,
        )
    if settings.operator_secret is None:
        raise RuntimeError("No operator secret or auth URL configured")
    return StaticSecretVerifier(settings.operator_secret)


class AccessGate:
    """Privilege flag of one session. Starts unprivileged and is never persisted."""

    def __init__(self, verifier: SecretVerifier) -> None:
        self._verifier = verifier
        self._privileged = False

    @property
    def privileged(self) -> bool:
        return self._privileged

    def login(self, supplied: str | None) -> bool:
        if supplied is None:
            # Prompt was cancelled.
            return False

        try:
            ok = self._verifier.verify(supplied)
        except Exception as e:
            logger.warning("Operator check failed (%s: %s)", type(e).__name__, e)
            return False

        if ok:
            self._privileged = True
            logger.info("Operator logged in")
        else:
            logger.info("Operator login rejected")
        return ok

    def logout(self) -> None:
        self._privileged = False
        logger.info("Operator logged out")
