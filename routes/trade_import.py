"""
Trade import API routes.

Column matching and import preview for trade journal CSV files.
Nothing here persists data; the client confirms the mapping and inserts.
"""

import json
from typing import Optional

from fastapi import APIRouter, File, Form, UploadFile
from fastapi.responses import JSONResponse
import structlog

from config.settings import get_settings
from config.trade_schema import get_schema_field, list_schema_fields
from exceptions import AppError
from exceptions.errors import (
    SchemaFieldNotFoundError,
    TradeCsvParseError,
    UploadTooLargeError,
)
from models.column_match import (
    SchemaField,
    SchemaFieldListResponse,
    MatchHeadersRequest,
    MatchHeadersResponse,
    MatchColumnsRequest,
    MatchColumnsResponse,
)
from parsers.trade_csv_parser import load_csv_rows, parse_csv_trades
from services.column_matcher_service import extract_column_samples, get_column_matcher_service
from services.header_matcher_service import match_headers, to_field_mapping

logger = structlog.get_logger(__name__)

router = APIRouter()


# ===================
# EXCEPTION HANDLER
# ===================

def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_dict()
        )
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred"
            }
        }
    )


def _parse_mapping_form(raw: Optional[str]) -> Optional[dict[str, Optional[str]]]:
    """Decode the JSON field_mapping form value. None/"" means auto-match."""
    if not raw:
        return None
    try:
        mapping = json.loads(raw)
    except json.JSONDecodeError as e:
        raise TradeCsvParseError(
            message="field_mapping must be valid JSON",
            details={"original_error": str(e)}
        )
    if not isinstance(mapping, dict) or not all(
        isinstance(k, str) and (v is None or isinstance(v, str)) for k, v in mapping.items()
    ):
        raise TradeCsvParseError(
            message="field_mapping must be an object of CSV header to field key"
        )
    return mapping


# ===================
# SCHEMA
# ===================

@router.get("/schema", response_model=SchemaFieldListResponse)
async def list_schema(required: Optional[bool] = None):
    """
    List canonical trade fields.

    Required fields come first, in their fixed order.
    """
    try:
        fields = list_schema_fields(required=required)
        return SchemaFieldListResponse(data=fields, total=len(fields))

    except Exception as e:
        return handle_error(e)


@router.get("/schema/{key}", response_model=SchemaField)
async def get_schema(key: str):
    """Get one canonical trade field by key."""
    try:
        schema_field = get_schema_field(key)
        if schema_field is None:
            raise SchemaFieldNotFoundError(key)
        return schema_field

    except SchemaFieldNotFoundError as e:
        return handle_error(e)
    except Exception as e:
        return handle_error(e)


# ===================
# MATCHING
# ===================

@router.post("/match-headers", response_model=MatchHeadersResponse)
async def match_csv_headers(data: MatchHeadersRequest):
    """
    Match CSV headers to trade fields by header text only.

    Returns one entry per header (db_field null when nothing clears the
    threshold) plus the resulting field_mapping.
    """
    try:
        threshold = data.threshold
        if threshold is None:
            threshold = get_settings().header_match_threshold
        matches = match_headers(data.headers, threshold=threshold)
        return MatchHeadersResponse(
            matches=matches,
            field_mapping=to_field_mapping(matches),
        )

    except Exception as e:
        return handle_error(e)


@router.post("/match-columns", response_model=MatchColumnsResponse)
async def match_csv_columns(data: MatchColumnsRequest):
    """
    Match CSV columns to trade fields from sample values.

    Send either `column_samples` ({header: [values]}) or raw `rows`.
    """
    try:
        service = get_column_matcher_service()
        if data.rows is not None:
            result = service.match_rows(
                data.rows,
                max_samples=data.max_samples,
                min_confidence=data.min_confidence,
                include_optional=data.include_optional,
            )
        else:
            result = service.match_columns(
                data.column_samples,
                min_confidence=data.min_confidence,
                include_optional=data.include_optional,
            )
        return MatchColumnsResponse.from_result(result)

    except Exception as e:
        return handle_error(e)


# ===================
# PREVIEW
# ===================

@router.post("/preview")
async def preview_import(
    file: UploadFile = File(...),
    field_mapping: Optional[str] = Form(None),
    default_risk_per_trade: Optional[float] = Form(None),
    default_risk_reward_ratio: Optional[float] = Form(None),
    account_balance: Optional[float] = Form(None),
):
    """
    Preview a trade CSV import without saving anything.

    Without `field_mapping` the columns are auto-matched first and the match
    result is returned alongside the parsed trades.

    Returns:
        filename, headers, match (or null), field_mapping, parse
    """
    try:
        app_settings = get_settings()
        content = await file.read()
        if len(content) > app_settings.max_upload_bytes:
            raise UploadTooLargeError(len(content), app_settings.max_upload_bytes)

        mapping = _parse_mapping_form(field_mapping)
        headers, rows = load_csv_rows(content)

        match = None
        if mapping is None:
            service = get_column_matcher_service()
            result = service.match_columns(
                extract_column_samples(rows, app_settings.csv_max_samples)
            )
            match = MatchColumnsResponse.from_result(result)
            mapping = result.field_mapping

        defaults = {
            "risk_per_trade": default_risk_per_trade,
            "risk_reward_ratio": default_risk_reward_ratio,
            "account_balance": account_balance,
        }
        parsed = parse_csv_trades(content, mapping, defaults)

        logger.info(
            "import_previewed",
            filename=file.filename,
            columns=len(headers),
            trades=len(parsed.trades),
            errors=len(parsed.errors),
            auto_matched=match is not None,
        )

        return {
            "filename": file.filename,
            "headers": headers,
            "match": match.model_dump() if match else None,
            "field_mapping": mapping,
            "parse": parsed.to_dict(),
        }

    except (TradeCsvParseError, UploadTooLargeError) as e:
        return handle_error(e)
    except Exception as e:
        return handle_error(e)
