"""Policy note suggestions from a hosted text model."""

from __future__ import annotations

import logging

import requests

from cekap_app.core.config import SuggestionConfig
from cekap_app.models.customer import InsuranceType, VehicleType
from cekap_app.services.document_assembler import DEFAULT_NOTES

logger = logging.getLogger(__name__)

API_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"


def build_prompt(vehicle_type: VehicleType, insurance_type: InsuranceType | None) -> str:
    if vehicle_type == VehicleType.OTHERS:
        subject = "project insurance policy"
    else:
        policy = insurance_type.value if insurance_type else "motor"
        subject = f"motor insurance {policy} policy"
    return (
        f"Generate a short, professional remark (max 20 words) for a {subject}. "
        "Make it sound like an official policy note."
    )


class SuggestionService:
    """Asks the model for a policy note and falls back to a fixed sentence."""

    def __init__(self, config: SuggestionConfig, api_key: str | None, session=None):
        self._config = config
        self._api_key = api_key
        self._session = session or requests.Session()

    def suggest(self, vehicle_type: VehicleType, insurance_type: InsuranceType | None) -> str:
        if not self._api_key:
            return DEFAULT_NOTES
        try:
            response = self._session.post(
                API_URL.format(model=self._config.model),
                params={"key": self._api_key},
                json={"contents": [{"parts": [{"text": build_prompt(vehicle_type, insurance_type)}]}]},
                timeout=self._config.timeout_seconds,
            )
            response.raise_for_status()
            data = response.json()
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except requests.RequestException as error:
            logger.warning("Suggestion request failed: %s", error)
            return DEFAULT_NOTES
        except (KeyError, IndexError, TypeError, ValueError) as error:
            logger.warning("Suggestion response was not usable: %s", error)
            return DEFAULT_NOTES
        return (text or "").strip() or DEFAULT_NOTES
