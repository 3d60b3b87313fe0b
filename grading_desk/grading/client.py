import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from grading_desk.grading.errors import ServiceError
from grading_desk.schemas.homework import HomeworkRead
from grading_desk.schemas.submission import SignedUrlRead, SubmissionRead, SubmissionSummary

logger = logging.getLogger(__name__)

SUBMISSIONS = "/api/submissions"
HOMEWORKS = "/api/homeworks"


def _extract_signed_url(data: Any) -> Optional[str]:
    # the display endpoint has answered with a bare string, {"signedUrl": ...}
    # and {"data": ...} over time
    if isinstance(data, str):
        return data
    if isinstance(data, dict):
        if data.get("signedUrl"):
            return data["signedUrl"]
        if isinstance(data.get("data"), str):
            return data["data"]
    return None


class GradingServiceClient:
    """Async client for the submission and homework endpoints."""

    def __init__(
        self,
        base_url: str = "",
        *,
        user_id: int,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ):
        self.user_id = user_id
        self._client = httpx.AsyncClient(
            base_url=base_url,
            transport=transport,
            timeout=timeout,
            headers={"X-User-Id": str(user_id)},
        )

    async def __aenter__(self) -> "GradingServiceClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> Any:
        try:
            response = await self._client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            detail = _error_detail(e.response)
            logger.warning("%s %s -> %s: %s", method, url, e.response.status_code, detail)
            raise ServiceError(detail, status_code=e.response.status_code) from e
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise ServiceError(str(e) or type(e).__name__) from e
        try:
            return response.json()
        except ValueError as e:
            logger.warning("%s %s returned a non-JSON body", method, url)
            raise ServiceError(f"Unexpected response from {url}", status_code=response.status_code) from e

    async def get_submission(self, submission_id: int) -> SubmissionRead:
        data = await self._request("GET", f"{SUBMISSIONS}/{submission_id}")
        return _parse(SubmissionRead, data)

    async def update_submission_grade(self, submission_id: int, payload: dict) -> SubmissionRead:
        data = await self._request("PUT", f"{SUBMISSIONS}/{submission_id}/grade", json=payload)
        return _parse(SubmissionRead, data)

    async def get_signed_display_url(self, submission_id: int, s3_key: str) -> str:
        data = await self._request(
            "GET", f"{SUBMISSIONS}/{submission_id}/display-url/{quote(s3_key, safe='')}"
        )
        url = _extract_signed_url(data)
        if url is None:
            raise ServiceError("Could not extract signed URL from response")
        return url

    async def get_signed_download_url(self, submission_id: int, s3_key: str) -> SignedUrlRead:
        data = await self._request(
            "GET", f"{SUBMISSIONS}/{submission_id}/download-url/{quote(s3_key, safe='')}"
        )
        return _parse(SignedUrlRead, data)

    async def list_homework_submissions(self, homework_id: int) -> list[SubmissionSummary]:
        data = await self._request("GET", f"{SUBMISSIONS}/homework/{homework_id}")
        return _parse_list(SubmissionSummary, data)

    async def get_homework(self, homework_id: int) -> HomeworkRead:
        data = await self._request("GET", f"{HOMEWORKS}/{homework_id}")
        return _parse(HomeworkRead, data)


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and "detail" in body:
        return str(body["detail"])
    return str(body)


def _parse(model: type[BaseModel], data: Any) -> Any:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        logger.warning("malformed %s in response: %s", model.__name__, e)
        raise ServiceError(f"Malformed {model.__name__} in response") from e


def _parse_list(model: type[BaseModel], data: Any) -> list:
    if not isinstance(data, list):
        raise ServiceError(f"Expected a list of {model.__name__}")
    return [_parse(model, row) for row in data]
