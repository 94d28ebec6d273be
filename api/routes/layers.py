"""
api/routes/layers.py -- Read-only layer catalog.

Routes:
  GET /layers  -- every layer with its ingredients and display colors (public)
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request
from sqlalchemy.exc import SQLAlchemyError

from api.models import LayerResponse
from catalog.store import LayerStore

logger = logging.getLogger("cakemaker.api")

router = APIRouter()


@router.get("/layers", response_model=list[LayerResponse])
def list_layers(request: Request) -> list[LayerResponse]:
    layer_store: LayerStore = request.app.state.layer_store
    try:
        layers = layer_store.list_layers()
    except SQLAlchemyError as exc:
        logger.error("Could not read layer catalog: %s", exc)
        raise HTTPException(status_code=404, detail="Could not find any layers.") from exc
    return [LayerResponse.from_layer(layer) for layer in layers]
