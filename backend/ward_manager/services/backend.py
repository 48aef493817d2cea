"""
Ward data backends.

Every screen operation is one round trip through a WardBackend: a select with
a Query, or a partial-column update of the rows a Query matches. Two
implementations are provided: SQLAlchemy over DATABASE_URL, and a hosted
PostgREST API reached over HTTP.
"""
import logging
from datetime import date, datetime, time
from typing import Any, Dict, List, Optional, Sequence

import httpx
from sqlalchemy.exc import SQLAlchemyError

from ..core.config import Settings
from ..core.errors import BackendError, QueryError
from ..models import base as models_base
from ..models.daily_report import DailyReport
from ..models.patient import Patient
from .query import Query, to_postgrest, to_sqlalchemy

logger = logging.getLogger(__name__)

PATIENTS_TABLE = "patients"
DAILY_REPORTS_TABLE = "daily_reports"


class WardBackend:
    """Interface shared by the SQL and REST backends."""

    def select(self, table: str, columns: Sequence[str], query: Query) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def update(self, table: str, values: Dict[str, Any], query: Query) -> int:
        """Apply ``values`` to every row ``query`` matches; return the row count."""
        raise NotImplementedError


class SqlBackend(WardBackend):
    MODELS = {
        PATIENTS_TABLE: Patient,
        DAILY_REPORTS_TABLE: DailyReport,
    }

    def __init__(self, session_factory=None):
        self._session_factory = session_factory

    def _session(self):
        factory = self._session_factory or models_base.SessionLocal
        return factory()

    def _model(self, table: str):
        model = self.MODELS.get(table)
        if model is None:
            raise QueryError(f"Unknown table {table!r}")
        return model

    def _check_columns(self, model, columns: Sequence[str]) -> None:
        for name in columns:
            if name not in model.__table__.columns:
                raise QueryError(f"{model.__tablename__} has no column {name!r}")

    def select(self, table: str, columns: Sequence[str], query: Query) -> List[Dict[str, Any]]:
        model = self._model(table)
        self._check_columns(model, columns)
        criteria, ordering = to_sqlalchemy(query, model)
        db = self._session()
        try:
            rows = db.query(model).filter(*criteria).order_by(*ordering).all()
            return [{name: getattr(row, name) for name in columns} for row in rows]
        except SQLAlchemyError as exc:
            logger.warning("SQL select on %s failed: %s", table, exc)
            raise BackendError(f"select {table}", str(exc)) from exc
        finally:
            db.close()

    def update(self, table: str, values: Dict[str, Any], query: Query) -> int:
        model = self._model(table)
        self._check_columns(model, list(values))
        criteria, _ = to_sqlalchemy(query, model)
        db = self._session()
        try:
            count = db.query(model).filter(*criteria).update(values, synchronize_session=False)
            db.commit()
            return count
        except SQLAlchemyError as exc:
            db.rollback()
            logger.warning("SQL update on %s failed: %s", table, exc)
            raise BackendError(f"update {table}", str(exc)) from exc
        finally:
            db.close()


def _json_value(value: Any) -> Any:
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return value


class RestBackend(WardBackend):
    """HTTP client for a hosted PostgREST API (``/rest/v1/<table>``)."""

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: int = 10,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["apikey"] = self.api_key
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            timeout=self.timeout,
            headers=self._headers(),
            transport=self._transport,
        )

    def select(self, table: str, columns: Sequence[str], query: Query) -> List[Dict[str, Any]]:
        params = [("select", ",".join(columns))] + to_postgrest(query)
        try:
            with self._client() as client:
                resp = client.get(f"/rest/v1/{table}", params=params)
                resp.raise_for_status()
                return resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("REST select on %s failed: %s", table, exc)
            raise BackendError(f"select {table}", str(exc)) from exc

    def update(self, table: str, values: Dict[str, Any], query: Query) -> int:
        params = to_postgrest(query)
        payload = {key: _json_value(value) for key, value in values.items()}
        try:
            with self._client() as client:
                resp = client.patch(
                    f"/rest/v1/{table}",
                    params=params,
                    json=payload,
                    headers={"Prefer": "return=representation"},
                )
                resp.raise_for_status()
                return len(resp.json())
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("REST update on %s failed: %s", table, exc)
            raise BackendError(f"update {table}", str(exc)) from exc


def build_backend(config: Settings) -> WardBackend:
    """Create the backend named by WARD_BACKEND."""
    kind = config.WARD_BACKEND.lower()
    if kind == "rest":
        if not config.REST_BASE_URL:
            raise ValueError("WARD_BACKEND=rest requires REST_BASE_URL")
        return RestBackend(config.REST_BASE_URL, config.REST_API_KEY, config.REST_TIMEOUT)
    if kind == "sql":
        return SqlBackend()
    raise ValueError(f"Unknown WARD_BACKEND {config.WARD_BACKEND!r}")
