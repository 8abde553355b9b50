"""
API Routes - Assessment Endpoints

All handlers are async. The engine is pure and CPU-light, so handlers call
it directly.
"""

import logging
from typing import List

from fastapi import APIRouter, HTTPException, status

from opterra.engine import OpterraResult, calculate_opterra_risk, project
from opterra.maintenance import MaintenanceSchedule
from opterra.physics import calculate_health
from opterra.scenarios import SCENARIOS, get_scenario
from opterra.taxonomy import ForensicInputs, UnknownFuelTypeError, default_inputs

from .schemas import (
    AssessmentRequest,
    IssuesResponse,
    ProjectionRequest,
    ProjectionResponse,
    ScenarioDetail,
    ScenarioSummary,
)


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/defaults/{fuel_type}",
    response_model=ForensicInputs,
    responses={404: {"description": "Unknown fuel type"}},
    summary="Default unit record for a fuel type",
)
async def get_defaults(fuel_type: str):
    try:
        return default_inputs(fuel_type)
    except UnknownFuelTypeError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.post(
    "/assess",
    response_model=OpterraResult,
    responses={422: {"description": "Validation error (invalid unit record)"}},
    summary="Full risk assessment for one unit",
)
async def assess(request: AssessmentRequest) -> OpterraResult:
    """
    Run the complete engine: metrics, issues, verdict, finance, maintenance.
    """
    result = calculate_opterra_risk(request.inputs, as_of=request.as_of)
    logger.info(
        f"[API] assess {result.inputs.fuel_type.value}: "
        f"{result.verdict.action.value} '{result.verdict.title}'"
    )
    return result


@router.post("/issues", response_model=IssuesResponse, summary="Issues and verdict only")
async def issues(request: AssessmentRequest) -> IssuesResponse:
    result = calculate_opterra_risk(request.inputs, as_of=request.as_of)
    return IssuesResponse(verdict=result.verdict, issues=result.issues)


@router.post("/maintenance", response_model=MaintenanceSchedule, summary="Maintenance schedule")
async def maintenance(request: AssessmentRequest) -> MaintenanceSchedule:
    result = calculate_opterra_risk(request.inputs, as_of=request.as_of)
    return result.maintenance


@router.post("/project", response_model=ProjectionResponse, summary="Forward health trend")
async def project_health(request: ProjectionRequest) -> ProjectionResponse:
    metrics = calculate_health(request.inputs)
    return ProjectionResponse(metrics=metrics, trend=project(metrics, request.months))


@router.get("/scenarios", response_model=List[ScenarioSummary], summary="List demo scenarios")
async def list_scenarios() -> List[ScenarioSummary]:
    return [
        ScenarioSummary(
            name=scenario.name,
            description=scenario.description,
            fuel_type=scenario.inputs["fuel_type"],
        )
        for scenario in SCENARIOS.values()
    ]


@router.get(
    "/scenarios/{name}",
    response_model=ScenarioDetail,
    responses={404: {"description": "Unknown scenario"}},
    summary="Preset unit record",
)
async def scenario_detail(name: str) -> ScenarioDetail:
    try:
        scenario = get_scenario(name)
    except KeyError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown scenario '{name}'",
        )
    return ScenarioDetail(
        name=scenario.name,
        description=scenario.description,
        fuel_type=scenario.inputs["fuel_type"],
        inputs=dict(scenario.inputs),
    )
