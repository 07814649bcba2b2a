"""
CRM bridge client.

Talks to the school's CRM backend (HTTP functions) for schedule offerings
and conversation sync, and triggers the pre-screen automation webhook.
"""

import logging
import os
from typing import Any, Dict, List

import httpx
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

BRIDGE_TIMEOUT = float(os.getenv("CRM_BRIDGE_TIMEOUT", "15.0"))


class CRMBridgeError(Exception):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


def _base_url() -> str:
    base = os.getenv("CRM_BRIDGE_BASE_URL")
    if not base:
        raise CRMBridgeError("CRM_BRIDGE_BASE_URL not set")
    return base.rstrip("/")


def _headers() -> Dict[str, str]:
    headers = {"Content-Type": "application/json"}
    key = (os.getenv("CRM_BRIDGE_API_KEY") or "").strip()
    if key:
        headers["X-Bridge-Key"] = key
    return headers


async def _post(path: str, body: Dict[str, Any]) -> Any:
    url = f"{_base_url()}{path}"
    async with httpx.AsyncClient(timeout=BRIDGE_TIMEOUT) as client:
        resp = await client.post(url, json=body, headers=_headers())

    if resp.status_code >= 400:
        raise CRMBridgeError(f"CRM bridge error {resp.status_code}: {resp.text}", resp.status_code)
    return _read_body(resp)


def _read_body(resp: httpx.Response) -> Any:
    """Decoded JSON body; 204s, empty and non-JSON bodies count as success."""
    if not resp.content:
        return {"ok": True}
    try:
        return resp.json()
    except ValueError:
        return {"ok": True}


async def fetch_schedule_options(course_code: str) -> List[Dict[str, Any]]:
    """Raw schedule offerings for one course code."""
    data = await _post("/chatbot/schedules", {"courseCode": course_code})
    if isinstance(data, dict):
        data = data.get("options") or data.get("items") or []
    if not isinstance(data, list):
        data = []
    logger.info(f"CRM returned {len(data)} schedule options for {course_code}")
    return data


async def sync_conversation(payload: Dict[str, Any]) -> Any:
    return await _post("/chatbot/inbox/sync", payload)


async def trigger_prescreen_automation(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Fire the pre-screen automation webhook.

    Returns {"ok": False, "skipped": True} when no webhook is configured.
    Some triggers answer 204 or a non-JSON body; those count as success.
    Non-object JSON answers are wrapped as {"ok": True, "response": ...}.
    """
    webhook = os.getenv("CRM_AUTOMATION_WEBHOOK_URL")
    if not webhook:
        return {"ok": False, "skipped": True}

    async with httpx.AsyncClient(timeout=BRIDGE_TIMEOUT) as client:
        resp = await client.post(webhook, json=payload, headers={"Content-Type": "application/json"})

    if resp.status_code >= 400:
        raise CRMBridgeError(f"Automation webhook error {resp.status_code}: {resp.text}", resp.status_code)

    result = _read_body(resp)
    if not isinstance(result, dict):
        result = {"ok": True, "response": result}
    return result
