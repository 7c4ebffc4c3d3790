from __future__ import annotations

from fastapi import FastAPI, HTTPException, Query

from mcr import journal
from mcr.api_models import PreviewRequest, PreviewResponse, RowView
from mcr.errors import ReconcilerError
from mcr.host import build_form
from mcr.reconciler import discriminator
from mcr.settings import settings

app = FastAPI(title="Multi-Collection Reconciler")


@app.on_event("startup")
def _startup() -> None:
    journal.configure_logging()
    if settings.enable_journal:
        journal.init_db()
    journal.log_event("INFO", "Preview service started")


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "healthy"}


@app.get("/events")
def events(limit: int = Query(settings.events_limit, ge=1, le=1000)) -> list[dict]:
    return journal.latest_events(limit)


@app.post("/preview", response_model=PreviewResponse)
def preview(req: PreviewRequest) -> PreviewResponse:
    """Run one set-data/submit cycle over the given data and report each phase."""
    resolver = discriminator(req.discriminator)
    form, _ = build_form(
        req.configs,
        resolver,
        resolver,
        allow_add=req.options.allow_add,
        allow_delete=req.options.allow_delete,
        delete_empty=req.options.delete_empty,
        name="preview",
    )
    try:
        form.set_data(req.data)
        initial_rows = [RowView(**r) for r in form.container.describe()]
        data = form.submit(req.submitted)
    except ReconcilerError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return PreviewResponse(
        initial_rows=initial_rows,
        submitted_rows=[RowView(**r) for r in form.container.describe()],
        data=data,
        effects=form.container.effects,
    )
