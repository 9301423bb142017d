"""
Barcode routing.

Single entry point for decoded scans. Decides whether a scan is usable
and which handler gets it:

1. Blank scans are dropped.
2. The same barcode is ignored while its cooldown runs (camera flicker).
3. The handler registered for the current mode is awaited.

Handler failures are reported and swallowed so the scan stream keeps
flowing. A handler that refuses a scan (ScanRejectedError) releases
the barcode, so the operator can scan it again right away.
"""

import asyncio
from typing import Optional
import structlog

from config import settings
from integrations.notifications import Notifier
from models.notification import NotificationCode
from models.scanning import RouterConfig, ScanMode, ScanOutcome
from exceptions import ScanRejectedError

logger = structlog.get_logger(__name__)


class BarcodeRouter:
    """
    Routes scans to the product lookup or shelf organization handler.

    Owned by one mode controller: constructed when the mode is entered,
    reset and discarded when it is left.
    """

    def __init__(
        self,
        config: Optional[RouterConfig] = None,
        cooldown_seconds: Optional[float] = None,
        notifier: Optional[Notifier] = None
    ):
        self._config = config or RouterConfig()
        self.cooldown_seconds = (
            cooldown_seconds if cooldown_seconds is not None
            else settings.scan_cooldown_seconds
        )
        self.notifier = notifier
        self._last_accepted_barcode: Optional[str] = None
        self._cooldown_handle: Optional[asyncio.TimerHandle] = None

        logger.info(
            "barcode_router_initialized",
            mode=self._config.mode.value,
            cooldown_seconds=self.cooldown_seconds
        )

    # ===================
    # CONFIGURATION
    # ===================

    @property
    def config(self) -> RouterConfig:
        return self._config

    @property
    def mode(self) -> ScanMode:
        return self._config.mode

    @property
    def last_accepted_barcode(self) -> Optional[str]:
        return self._last_accepted_barcode

    @property
    def cooling_down(self) -> bool:
        return self._cooldown_handle is not None

    def update_config(self, **changes) -> RouterConfig:
        """
        Merge changes into the config.

        The merged config replaces the old one in a single assignment and
        applies from the next scan. A mode change also resets the cooldown.

        Args:
            **changes: Any RouterConfig field (mode, product_lookup_handler,
                shelf_organization_handler)

        Returns:
            The new config

        Raises:
            pydantic.ValidationError: On unknown fields or bad values
        """
        current = self._config
        updated = RouterConfig.model_validate({**dict(current), **changes})
        self._config = updated

        logger.info(
            "barcode_router_config_updated",
            mode=updated.mode.value,
            has_product_lookup_handler=updated.product_lookup_handler is not None,
            has_shelf_organization_handler=updated.shelf_organization_handler is not None
        )

        if updated.mode != current.mode:
            self.reset()

        return updated

    # ===================
    # SCAN HANDLING
    # ===================

    async def handle_scan(self, barcode: Optional[str]) -> ScanOutcome:
        """
        Handle one decoded scan.

        Args:
            barcode: Decoded barcode text

        Returns:
            ScanOutcome describing what happened to the scan
        """
        barcode = (barcode or "").strip()
        if not barcode:
            logger.debug("empty_barcode_ignored")
            return ScanOutcome.IGNORED_EMPTY

        if barcode == self._last_accepted_barcode and self.cooling_down:
            logger.debug("duplicate_scan_suppressed", barcode=barcode)
            return ScanOutcome.SUPPRESSED_DUPLICATE

        self._last_accepted_barcode = barcode
        self._arm_cooldown()

        # One snapshot per scan
        config = self._config
        handler = config.handler_for(config.mode)

        if handler is None:
            logger.warning(
                "no_handler_configured",
                mode=config.mode.value,
                barcode=barcode
            )
            if self.notifier:
                self.notifier.notify(NotificationCode.ROUTER_NOT_CONFIGURED, mode=config.mode.value)
            return ScanOutcome.NO_HANDLER

        logger.info("routing_scan", barcode=barcode, mode=config.mode.value)

        try:
            await handler(barcode)
        except ScanRejectedError as e:
            # Not an accepted scan: no cooldown for it
            logger.info(
                "scan_rejected",
                barcode=barcode,
                mode=config.mode.value,
                reason=e.reason
            )
            self._release(barcode)
            return ScanOutcome.REJECTED
        except Exception as e:
            logger.error(
                "scan_handler_failed",
                barcode=barcode,
                mode=config.mode.value,
                error=str(e),
                error_type=type(e).__name__
            )
            if self.notifier:
                self.notifier.notify(
                    NotificationCode.SCAN_FAILED,
                    barcode=barcode,
                    reason=getattr(e, "message", None) or str(e) or type(e).__name__
                )
            return ScanOutcome.HANDLER_FAILED

        return ScanOutcome.ACCEPTED

    def reset(self) -> None:
        """Forget the last barcode and cancel the cooldown timer."""
        logger.debug("barcode_router_reset", last_barcode=self._last_accepted_barcode)
        self._last_accepted_barcode = None
        if self._cooldown_handle is not None:
            self._cooldown_handle.cancel()
            self._cooldown_handle = None

    # ===================
    # COOLDOWN
    # ===================

    def _arm_cooldown(self) -> None:
        if self._cooldown_handle is not None:
            self._cooldown_handle.cancel()
        loop = asyncio.get_running_loop()
        self._cooldown_handle = loop.call_later(self.cooldown_seconds, self._cooldown_expired)

    def _release(self, barcode: str) -> None:
        if self._last_accepted_barcode == barcode:
            self.reset()

    def _cooldown_expired(self) -> None:
        self._cooldown_handle = None
        self._last_accepted_barcode = None
        logger.debug("barcode_cooldown_expired")
