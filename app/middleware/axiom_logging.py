"""Axiom API 로깅 미들웨어.

Axiom API logging middleware.
Sends one structured event per API request to Axiom: method, path,
pageable/query params, path params, status code, duration, error reason.
Sensitive query keys are masked. When Axiom is not configured the
middleware passes requests straight through.
"""

import json
import re
import time
from typing import Any

from axiom_py import Client as AxiomClient
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.config import settings

# 마스킹 대상 키 패턴 — Keys whose values never reach the log
_SENSITIVE_KEYS = re.compile(
    r"(password|passwd|secret|token|authorization|api_key|apikey|credential)",
    re.IGNORECASE,
)

# 로깅 제외 경로 — Paths excluded from logging
_SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}

# 에러 사유 최대 길이 — Max length of the error reason kept in an event
_MAX_ERROR_LEN = 500


def _mask_dict(data: dict[str, Any]) -> dict[str, Any]:
    """민감 키 마스킹 — Replace values of sensitive keys with ``***``."""
    return {k: "***" if _SENSITIVE_KEYS.search(k) else v for k, v in data.items()}


def _query_params(request: Request) -> dict[str, Any] | None:
    """쿼리 파라미터 수집 — 반복 파라미터(sort 등)는 목록으로 유지.

    Collect query params; repeated keys such as ``sort`` stay lists.
    """
    if not request.query_params:
        return None
    collected: dict[str, Any] = {}
    for key in request.query_params.keys():
        values: list[str] = request.query_params.getlist(key)
        collected[key] = values if len(values) > 1 else values[0]
    return _mask_dict(collected)


def _error_detail(body: bytes) -> str:
    """에러 응답 본문에서 사유 추출 — Extract ``detail`` from an error body."""
    try:
        data = json.loads(body)
        detail = data.get("detail", data) if isinstance(data, dict) else data
        text = detail if isinstance(detail, str) else json.dumps(detail, ensure_ascii=False)
    except (json.JSONDecodeError, UnicodeDecodeError):
        text = body.decode("utf-8", errors="replace")
    return text if len(text) <= _MAX_ERROR_LEN else text[:_MAX_ERROR_LEN] + "..."


def build_log_event(
    request: Request,
    status_code: int,
    duration_ms: float,
    error: str | None = None,
) -> dict[str, Any]:
    """Axiom 로그 이벤트를 구성합니다 — Build one Axiom log event."""
    event: dict[str, Any] = {
        "method": request.method,
        "path": request.url.path,
        "status_code": status_code,
        "duration_ms": duration_ms,
    }
    query = _query_params(request)
    if query:
        event["query_params"] = query
    if request.path_params:
        event["path_params"] = dict(request.path_params)
    if error:
        event["error"] = error
    return event


class AxiomLoggingMiddleware(BaseHTTPMiddleware):
    """모든 API 요청/응답을 Axiom에 로깅하는 미들웨어.

    Middleware that logs every API request to Axiom.

    Args:
        app: ASGI 애플리케이션 (Wrapped ASGI app)
        client: Axiom 클라이언트, None이면 설정값으로 생성
                (Axiom client; built from settings when omitted)
        dataset: Axiom 데이터셋 이름 (Dataset name; settings value when omitted)
    """

    def __init__(
        self,
        app: Any,
        client: AxiomClient | None = None,
        dataset: str | None = None,
    ) -> None:
        super().__init__(app)
        self._dataset: str = dataset or settings.AXIOM_DATASET
        self._client: AxiomClient | None = client
        if self._client is None and settings.AXIOM_API_TOKEN and self._dataset:
            self._client = AxiomClient(token=settings.AXIOM_API_TOKEN)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # 제외 경로 또는 Axiom 미설정 — Skip excluded paths / unconfigured Axiom
        if request.url.path in _SKIP_PATHS or self._client is None:
            return await call_next(request)

        start_time: float = time.perf_counter()
        status_code: int = 500
        error: str | None = None
        try:
            response: Response = await call_next(request)
            status_code = response.status_code

            if status_code >= 400:
                body = b""
                async for chunk in response.body_iterator:
                    body += chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")
                error = _error_detail(body)
                # 소비한 body를 다시 응답으로 반환 — Re-wrap the consumed body
                response = Response(
                    content=body,
                    status_code=status_code,
                    headers=dict(response.headers),
                    media_type=response.media_type,
                )
        except Exception as exc:
            error = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            duration_ms: float = round((time.perf_counter() - start_time) * 1000, 2)
            self._ingest(build_log_event(request, status_code, duration_ms, error))

        return response

    def _ingest(self, event: dict[str, Any]) -> None:
        """Axiom 전송 — 실패해도 요청 처리에는 영향 없음.

        Send the event; an ingest failure never breaks the request.
        """
        try:
            self._client.ingest_events(self._dataset, [event])
        except Exception:
            pass  # 로깅 실패가 요청 처리에 영향주지 않도록
