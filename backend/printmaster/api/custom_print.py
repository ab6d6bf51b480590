import logging
import os
import shutil
from pathlib import Path
from typing import Literal, Optional
from uuid import uuid4

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from pydantic import BaseModel

from printmaster import config
from printmaster.api.cart import cart_view
from printmaster.db.store import StateStore, get_store
from printmaster.services.configurator import ConfiguratorState, SourceFile
from printmaster.state import AppState, get_state

logger = logging.getLogger(__name__)
router = APIRouter()


class PrintConfig(BaseModel):
    print_type: Optional[Literal["BW", "Color"]] = None
    side_type: Optional[Literal["Single", "Double"]] = None
    binding: Optional[Literal["None", "Spiral", "Wire", "Hard"]] = None


def _save_upload(name: str, content: bytes) -> str:
    folder = Path(config.UPLOAD_DIR) / uuid4().hex
    os.makedirs(folder, exist_ok=True)
    path = folder / Path(name).name
    path.write_bytes(content)
    return str(path)


def _discard_upload(url: Optional[str]) -> None:
    """Remove a saved upload folder that no cart line points at."""
    if not url:
        return
    folder = Path(url).parent
    if folder.resolve().parent != Path(config.UPLOAD_DIR).resolve():
        return
    shutil.rmtree(folder, ignore_errors=True)
    logger.debug("Removed upload folder=%s", folder)


@router.get("/")
def status(state: AppState = Depends(get_state)):
    return state.configurator.snapshot()


@router.post("/upload")
async def upload(file: UploadFile = File(...), state: AppState = Depends(get_state)):
    content = await file.read()
    name = file.filename or "document"
    logger.info("Custom print upload file=%s type=%s size=%s", name, file.content_type, len(content))
    if not content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")
    cfg = state.configurator
    # a counted file that was never committed is replaced; in-flight uploads clean up after themselves
    if cfg.state != ConfiguratorState.UPLOADING:
        _discard_upload(cfg.file_url)
    url = _save_upload(name, content)
    result = await cfg.upload(SourceFile(name=name, url=url, content=content,
                                         content_type=file.content_type or ""))
    if not result.ok:
        _discard_upload(url)
    if result.stale:
        raise HTTPException(status_code=409, detail="Upload superseded by a newer one")
    if not result.ok:
        raise HTTPException(status_code=400, detail=f"Could not count pages: {result.error}")
    return cfg.snapshot()


@router.put("/options")
def configure(body: PrintConfig, state: AppState = Depends(get_state)):
    state.configurator.configure(body.print_type, body.side_type, body.binding)
    return state.configurator.snapshot()


@router.post("/commit")
def commit(state: AppState = Depends(get_state), store: StateStore = Depends(get_store)):
    line = state.configurator.commit(state.cart)
    store.save_cart(state.cart)
    return {"line": line, "cart": cart_view(state.cart)}


@router.delete("/")
def reset(state: AppState = Depends(get_state)):
    _discard_upload(state.configurator.file_url)
    state.configurator.reset()
    return state.configurator.snapshot()
