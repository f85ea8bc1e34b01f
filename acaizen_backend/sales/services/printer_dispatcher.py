# sales/services/printer_dispatcher.py

"""
======================================================
PATH: sales/services/printer_dispatcher.py
======================================================
PRINTER DISPATCHER (best effort)

Purpose:
- POST plain-text receipts to the local print helper:
      POST http://{host}:{port}/print          {"receipt": "<text>"}
      POST http://{host}:{port}/print-kitchen  {"receipt": "<text>"}
- Printer test page

Rules:
- Success is any 2xx answer.
- Network / HTTP / bad-address failures are logged at WARNING and reported as False.
  Nothing here ever raises into the sale flow.
- Timeout comes from settings.PRINT_HELPER_TIMEOUT_SECONDS.
"""

from __future__ import annotations

import json
import logging
from typing import Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from django.conf import settings

from sales.services.receipt_formatter import build_printer_test_page
from store.models import StoreConfig

logger = logging.getLogger(__name__)

PRINT_PATH = "/print"
KITCHEN_PATH = "/print-kitchen"


def _timeout() -> float:
    return float(getattr(settings, "PRINT_HELPER_TIMEOUT_SECONDS", 3.0) or 3.0)


def _post_receipt(url: str, text: str) -> bool:
    body = json.dumps({"receipt": text}, ensure_ascii=False).encode("utf-8")

    try:
        req = Request(
            url,
            data=body,
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            method="POST",
        )
        with urlopen(req, timeout=_timeout()) as resp:
            status = getattr(resp, "status", None) or resp.getcode()
    except HTTPError as e:
        logger.warning("Print helper rejected receipt url=%s status=%s", url, e.code)
        return False
    except (URLError, OSError) as e:
        # OSError covers socket timeouts and refused connections
        logger.warning("Print helper unreachable url=%s error=%s", url, e)
        return False
    except (ValueError, OverflowError) as e:
        # bad host/port in the store config (http.client.InvalidURL is a ValueError)
        logger.warning("Print helper address invalid url=%s error=%s", url, e)
        return False

    if 200 <= int(status) < 300:
        return True

    logger.warning("Print helper answered non-2xx url=%s status=%s", url, status)
    return False


def send_receipt(text: str, *, config: Optional[StoreConfig] = None) -> bool:
    config = config or StoreConfig.load()
    return _post_receipt(f"{config.printer_base_url}{PRINT_PATH}", text)


def send_kitchen_receipt(text: str, *, config: Optional[StoreConfig] = None) -> bool:
    config = config or StoreConfig.load()
    return _post_receipt(f"{config.printer_base_url}{KITCHEN_PATH}", text)


def send_test_page(*, config: Optional[StoreConfig] = None) -> bool:
    config = config or StoreConfig.load()
    return send_receipt(build_printer_test_page(config.store_name), config=config)


def receipt_download_filename(now_ms: int) -> str:
    return f"cupom-acaizen-{now_ms}.html"
