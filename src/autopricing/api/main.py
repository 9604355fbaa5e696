"""
AutoPricing API - calculation, history and report endpoints.
"""
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse, Response
from pydantic import BaseModel, Field

# Add src to path for internal imports
src_path = Path(__file__).parent.parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from autopricing import __version__
from autopricing.engine import PricingEngine, PricingInputError, PricingMode, format_money
from autopricing.services import history_export
from autopricing.services.history_service import HistoryStore
from autopricing.services.report_renderer import render_pdf, report_filename
from autopricing.api.state import get_engine, get_history_store

logger = logging.getLogger(__name__)

app = FastAPI(
    title="AutoPricing API",
    description="Cost-plus pricing calculator with saved history and PDF reports",
    version=__version__,
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


class CalcRequest(BaseModel):
    mode: PricingMode = PricingMode.ITEMIZED
    input: Dict[str, Any] = Field(default_factory=dict)
    strict: bool = False


class ValidationResponse(BaseModel):
    valid: bool
    errors: List[str]
    warnings: List[str]


def _record_response(record, currency_symbol: str) -> dict:
    """Serialized record plus display-ready rounded amounts and trace."""
    data = record.to_dict()
    data['display'] = {
        'final_price': format_money(record.final_price, currency_symbol),
        'trace': [{'step': t.step, 'description': t.description, 'value': t.value}
                  for t in record.trace()],
    }
    return data


def _compute(req: CalcRequest, engine: PricingEngine):
    try:
        return engine.compute(req.input, req.mode, strict=req.strict)
    except PricingInputError as e:
        logger.info("Rejected strict calculation: %s", e)
        raise HTTPException(status_code=422, detail={
            "errors": e.result.errors,
            "warnings": e.result.warnings,
        })


@app.get("/")
async def root():
    return {"status": "online", "message": "AutoPricing API Active"}


@app.post("/calculate")
async def calculate(req: CalcRequest, engine: PricingEngine = Depends(get_engine)):
    record = _compute(req, engine)
    return _record_response(record, engine.settings.currency_symbol)


@app.post("/validate", response_model=ValidationResponse)
async def validate(req: CalcRequest, engine: PricingEngine = Depends(get_engine)):
    result = engine.validate(req.input, req.mode)
    return ValidationResponse(valid=result.valid, errors=result.errors, warnings=result.warnings)


@app.get("/history")
async def list_history(store: HistoryStore = Depends(get_history_store)):
    return [record.to_dict() for record in store.load()]


@app.post("/history", status_code=201)
async def add_history(req: CalcRequest,
                      engine: PricingEngine = Depends(get_engine),
                      store: HistoryStore = Depends(get_history_store)):
    record = _compute(req, engine)
    history = store.append(record)
    return {"record": _record_response(record, engine.settings.currency_symbol), "count": len(history)}


@app.delete("/history")
async def clear_history(store: HistoryStore = Depends(get_history_store)):
    store.clear()
    return {"count": 0}


@app.get("/history/export.csv", response_class=PlainTextResponse)
async def export_history(store: HistoryStore = Depends(get_history_store)):
    return PlainTextResponse(
        history_export.to_csv(store.load()),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="pricing_history.csv"'},
    )


@app.delete("/history/{index}")
async def delete_history(index: int, store: HistoryStore = Depends(get_history_store)):
    try:
        history = store.delete_at(index)
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"count": len(history)}


@app.get("/history/{index}/report")
async def history_report(index: int,
                         store: HistoryStore = Depends(get_history_store),
                         engine: PricingEngine = Depends(get_engine)):
    try:
        record = store.get(index)
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(
        content=render_pdf(record, engine.settings),
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{report_filename(record)}"'},
    )
