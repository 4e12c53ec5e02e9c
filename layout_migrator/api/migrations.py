"""
Layout Migrator — Migrations API (POST /api/migrations/transform, POST /api/migrations)

`transform` is pure: the caller posts a v1 layout and receives the v2 result.
The root endpoint drives the full flow against the configured Prolibu account.
"""

from fastapi import APIRouter, HTTPException, Request
from pydantic import ValidationError

from layout_migrator.api.limits import limiter
from layout_migrator.client import ProlibuApiError, ProlibuConfig, ProlibuParseError, create_content_template
from layout_migrator.config import generate_error_code, log, settings
from layout_migrator.models import MigrateRequest, MigrateResponse, MigrationResult, SourceLayout
from layout_migrator.pipeline import MigrationError, migrate, migrate_from_layout

router = APIRouter(prefix="/api/migrations", tags=["migrations"])


@router.post("/transform", response_model=MigrationResult)
@limiter.limit(settings.migration_rate_limit)
def transform_layout(body: SourceLayout, request: Request) -> MigrationResult:
    """
    POST /api/migrations/transform

    Body: a v1 layout (as returned by GET /v2/contenttemplate/{id}).
    Returns: { document, validation, warnings, stats }. No IO; runs in the threadpool.
    """
    try:
        return migrate_from_layout(body)
    except MigrationError as e:
        code = generate_error_code()
        log("ERROR", "transform failed", template_id=body.id, error_code=code, error=str(e))
        raise HTTPException(status_code=400, detail={"message": str(e), "error_code": code})


@router.post("", response_model=MigrateResponse)
@limiter.limit(settings.migration_rate_limit)
async def run_migration(body: MigrateRequest, request: Request) -> MigrateResponse:
    """
    POST /api/migrations

    Fetch the template from the configured account, sync fonts, transform and,
    unless dryRun, upload the result as a new content template.
    """
    if not settings.prolibu_api_url or not settings.prolibu_auth_token:
        code = generate_error_code()
        log("ERROR", "migration not configured", template_id=body.template_id, error_code=code)
        raise HTTPException(
            status_code=503,
            detail={"message": "Prolibu API credentials are not configured.", "error_code": code},
        )

    config = ProlibuConfig.from_settings()
    font_config = config if body.sync_fonts and settings.sync_fonts else None

    try:
        result = await migrate(body.template_id, config=config, font_api_config=font_config)
        created = None
        if not body.dry_run:
            created = await create_content_template(result.document, config, body.name, body.template_type)
    except MigrationError as e:
        code = generate_error_code()
        log("ERROR", "migration failed", template_id=body.template_id, error_code=code, error=str(e))
        raise HTTPException(status_code=400, detail={"message": str(e), "error_code": code})
    except (ProlibuApiError, ProlibuParseError, ValidationError) as e:
        code = generate_error_code()
        log("ERROR", "prolibu api call failed", template_id=body.template_id, error_code=code, error=str(e))
        raise HTTPException(
            status_code=502,
            detail={"message": f"Prolibu API error: {e}", "error_code": code},
        )

    log(
        "INFO",
        "migration request completed",
        template_id=body.template_id,
        dry_run=body.dry_run,
        created_id=created.id if created else None,
        valid=result.validation.valid,
    )
    return MigrateResponse(result=result, created=created)
