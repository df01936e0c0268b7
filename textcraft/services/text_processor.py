"""
Client-facing text processor.

Coalesces bursts of calls through a Debouncer before they reach the
orchestrator, and switches to the offline misspelling dictionary when the
network is down and the active provider needs it.
"""

import asyncio
from typing import Any, Callable, Dict, List, Optional

from textcraft.config.logging_config import get_logger
from textcraft.config.orchestrator import get_orchestrator_config
from textcraft.llm.types import Operation, RephraseStyle, TextRequest, TextResponse
from textcraft.services.debouncer import Debouncer
from textcraft.services.llm_service import LLMService, build_request
from textcraft.services.offline import offline_response

logger = get_logger(__name__)


class TextProcessor:
    """
    Debounced façade over LLMService.

    All calls through one instance share one debounce queue, so a grammar
    check and a rephrase issued within the quiet period coalesce into the
    later of the two. Use separate instances for independent debouncing.
    """

    def __init__(
        self,
        service: LLMService,
        delay_s: Optional[float] = None,
        is_online: Optional[Callable[[], bool]] = None,
    ):
        """
        Args:
            service: Orchestrator that handles the requests
            delay_s: Debounce quiet period (None = TEXTCRAFT_DEBOUNCE_MS)
            is_online: Connectivity signal; assumed online when omitted
        """
        if delay_s is None:
            delay_s = get_orchestrator_config().debounce_delay_s

        self.service = service
        self._is_online = is_online or (lambda: True)
        self._debouncer = Debouncer(self._dispatch, delay_s)

    @property
    def delay_s(self) -> float:
        return self._debouncer.delay_s

    async def _dispatch(self, request: TextRequest) -> TextResponse:
        if not self._is_online() and self.service.requires_network:
            logger.info("🤖 Text processor: Offline, using local misspelling dictionary")
            return offline_response(request.text)
        return await self.service.process(request)

    async def process_request(
        self,
        text: str,
        operation: Operation | str,
        options: Optional[Dict[str, Any]] = None,
    ) -> TextResponse:
        """
        Debounced entry point.

        Resolves with the result of the last call made within the quiet
        period; superseded calls receive that same result.

        Args:
            text: Content to process
            operation: "grammar-check" or "rephrase"
            options: Optional "style" and "language"

        Raises:
            RequestValidationError: Malformed input (not debounced)
        """
        options = options or {}
        request = build_request(
            text,
            operation,
            style=options.get("style"),
            language=options.get("language"),
        )
        LLMService.validate_request(request)

        return await self._debouncer(request)

    async def check_grammar(self, text: str, language: str = "en") -> TextResponse:
        return await self.process_request(text, Operation.GRAMMAR_CHECK, {"language": language})

    async def rephrase_text(self, text: str, style: RephraseStyle | str = RephraseStyle.FORMAL) -> TextResponse:
        return await self.process_request(text, Operation.REPHRASE, {"style": style})

    async def process_batch(
        self,
        texts: List[str],
        operation: Operation | str,
        options: Optional[Dict[str, Any]] = None,
    ) -> List[TextResponse]:
        """
        Process several texts concurrently, bypassing the debouncer.

        Every item is validated before any request is dispatched. Results are
        returned in input order.

        Raises:
            RequestValidationError: Any item is malformed
        """
        options = options or {}
        requests = []
        for text in texts:
            request = build_request(
                text,
                operation,
                style=options.get("style"),
                language=options.get("language"),
            )
            LLMService.validate_request(request)
            requests.append(request)

        logger.info(f"🤖 Text processor: Processing batch of {len(requests)} request(s)")
        return list(await asyncio.gather(*(self._dispatch(request) for request in requests)))

    def cancel_pending(self) -> None:
        """Cancel a debounced call that has not fired yet."""
        self._debouncer.cancel()
