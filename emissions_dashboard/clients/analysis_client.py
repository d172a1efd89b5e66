"""Client for the document-analysis service.

The service takes PDF links, questions and page-filter keywords, reads the
documents and answers every question with a summary and supporting
evidence. One call answers all questions of a re-run.
"""

import logging
from typing import List, Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from emissions_dashboard.clients.base_client import BaseHTTPClient
from emissions_dashboard.errors import UpstreamError
from emissions_dashboard.schemas.analysis import AnalysisRequest, AnalysisResult

logger = logging.getLogger(__name__)

_RESULTS = TypeAdapter(List[AnalysisResult])


class AnalysisClient(BaseHTTPClient):
    def __init__(
        self,
        url: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        super().__init__(base_url=url, timeout=timeout, transport=transport)

    def analyze(self, request: AnalysisRequest) -> List[AnalysisResult]:
        """Send one analysis request and parse the list of results.

        Raises ``UpstreamError`` if the call fails or the body is not a list
        of well-formed results.
        """
        logger.info(
            "Analysing %d document(s) for %d question(s)",
            len(request.pdf_urls),
            len(request.questions),
        )
        data = self._post("", request.model_dump())

        try:
            results = _RESULTS.validate_python(data)
        except ValidationError as exc:
            logger.error("Malformed analysis response: %s", exc)
            raise UpstreamError(
                f"Analysis service returned a malformed response: {exc.error_count()} error(s)"
            ) from exc

        logger.info("Analysis returned %d result(s)", len(results))
        return results
