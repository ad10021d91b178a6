from __future__ import annotations

from pathlib import Path
from typing import Any

from fastapi import FastAPI, HTTPException

from basket_governance.config import AppSettings, get_settings
from basket_governance.errors import GovernanceValidationError
from basket_governance.governance.deployment import load_deployment
from basket_governance.governance.governor import ProposalGovernor


def build_governance_app(settings: AppSettings, governor: ProposalGovernor) -> FastAPI:
    """Read-only HTTP views over a governor; nothing here mutates state."""
    app = FastAPI(title=f"{settings.dao_name}-governance", version="0.1.0")

    @app.get("/livez")
    async def livez() -> dict[str, str]:
        return {"status": "ok", "governor": governor.address}

    @app.get("/readyz")
    async def readyz() -> dict[str, Any]:
        return {
            "status": "ok",
            "proposal_count": governor.proposal_count,
            "proposal_threshold": governor.parameters.proposal_threshold,
            "quorum_percentage": governor.parameters.quorum_percentage,
            "quorum_votes": governor.quorum_votes(),
        }

    @app.get("/proposals/{proposal_id}")
    async def proposal_details(proposal_id: int) -> dict[str, Any]:
        try:
            return governor.get_proposal_details(proposal_id).as_dict()
        except GovernanceValidationError as exc:
            raise HTTPException(status_code=404, detail=exc.reason) from exc

    @app.get("/proposals/{proposal_id}/voting")
    async def proposal_voting(proposal_id: int) -> dict[str, int]:
        try:
            return governor.get_proposal_voting(proposal_id).as_dict()
        except GovernanceValidationError as exc:
            raise HTTPException(status_code=404, detail=exc.reason) from exc

    @app.get("/proposals/{proposal_id}/votes/{voter}")
    async def proposal_vote(proposal_id: int, voter: str) -> dict[str, Any]:
        try:
            governor.get_proposal_voting(proposal_id)
        except GovernanceValidationError as exc:
            raise HTTPException(status_code=404, detail=exc.reason) from exc
        try:
            return governor.get_vote(proposal_id, voter).as_dict()
        except GovernanceValidationError as exc:
            raise HTTPException(status_code=422, detail=exc.reason) from exc

    return app


def default_governance_app() -> FastAPI:
    settings = get_settings()
    deployment = load_deployment(Path(settings.state_path), settings)
    return build_governance_app(settings, deployment.governor)
