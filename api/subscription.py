"""Client for the external email-subscription endpoint.

The endpoint itself (form, storage, delivery) lives outside this project.
Callers only invoke it after the wizard has produced a result, and a failed
submission never affects wizard state.
"""

import logging
import os
import time
from typing import Mapping, Optional

import requests
from pydantic import ValidationError

from core.constants import DEFAULT_SUBSCRIBE_TIMEOUT, MAX_RETRIES, RETRY_DELAY
from core.models import Recommendation

from .schemas import SubscriptionRequest


class SubscriptionClient:
    """POSTs a SubscriptionRequest as JSON to a configured URL.

    Example:
        client = SubscriptionClient("https://example.org/subscribe")
        ok = client.subscribe("jo@example.org", session.current_result())
    """

    def __init__(
        self,
        endpoint_url: Optional[str] = None,
        timeout: int = DEFAULT_SUBSCRIBE_TIMEOUT,
        max_retries: int = MAX_RETRIES,
        retry_delay: float = RETRY_DELAY,
    ):
        """Initialize the client.

        Args:
            endpoint_url: Subscription endpoint, defaults to QUIZ_SUBSCRIBE_URL
            timeout: Per-request timeout in seconds
            max_retries: Retries after the first failed attempt
            retry_delay: Base delay in seconds, multiplied by the attempt number
        """
        self.endpoint_url = endpoint_url or os.getenv("QUIZ_SUBSCRIBE_URL")
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay

    def build_request(
        self,
        email: str,
        recommendation: Recommendation,
        answers: Optional[Mapping[int, str]] = None,
    ) -> SubscriptionRequest:
        """Raises pydantic.ValidationError for a malformed email."""
        return SubscriptionRequest(
            email=email,
            professional_bodies=list(recommendation.professional_bodies),
            fedip_level=recommendation.fedip_level,
            answers={str(step): answer for step, answer in (answers or {}).items()},
        )

    def subscribe(
        self,
        email: str,
        recommendation: Recommendation,
        answers: Optional[Mapping[int, str]] = None,
    ) -> bool:
        """Submit a subscription.

        Returns:
            True if the endpoint accepted the request, False otherwise
        """
        if not self.endpoint_url:
            logging.warning("QUIZ_SUBSCRIBE_URL is not set, skipping subscription")
            return False

        try:
            payload = self.build_request(email, recommendation, answers)
        except ValidationError as e:
            logging.warning(f"Invalid subscription request for '{email}': {e}")
            return False

        body = payload.model_dump(mode="json")
        for attempt in range(self.max_retries + 1):
            try:
                response = requests.post(self.endpoint_url, json=body, timeout=self.timeout)
                response.raise_for_status()
                return True
            except requests.exceptions.RequestException as e:
                if attempt < self.max_retries:
                    delay = self.retry_delay * (attempt + 1)
                    logging.warning(
                        f"Subscription attempt {attempt + 1} failed: {e}; retrying in {delay:.1f}s"
                    )
                    time.sleep(delay)
                else:
                    logging.warning(f"Subscription failed after {self.max_retries} retries: {e}")
        return False
