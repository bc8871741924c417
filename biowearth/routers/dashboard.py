from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends

from biowearth.dependencies import get_hub
from biowearth.services.dashboard_service import build_dashboard
from biowearth.services.snapshot_hub import SnapshotHub

router = APIRouter(prefix='/dashboard', tags=['dashboard'])


@router.get('')
def overview(hub: SnapshotHub = Depends(get_hub)):
    return asdict(build_dashboard(hub.inputs))
