"""
Placement API endpoints.

Exposes the optimizer over HTTP: callers post their hosts and virtual
machines with optional evolution parameters and receive the best placement
found, or fetch the reference datacenter to experiment with.
"""

from typing import Dict, Any, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field
import logfire

from src.core.config import settings
from src.placement.core.config import EvolutionParameters, LoggingConfig, PlacementConfig
from src.placement.core.descriptors import ResourceNode, WorkloadUnit
from src.placement.core.engine import optimize_placement
from src.placement.scenarios import create_reference_datacenter


router = APIRouter()


class ResourceVector(BaseModel):
    """Amounts on the four resource dimensions."""

    compute: float = Field(ge=0.0, description="Compute (total MIPS)")
    memory: float = Field(ge=0.0, description="Memory (MB)")
    storage: float = Field(ge=0.0, description="Storage (MB)")
    bandwidth: float = Field(ge=0.0, description="Network bandwidth (Mbps)")


class NodeSchema(ResourceVector):
    node_id: int


class UnitSchema(ResourceVector):
    unit_id: int


class OptimizationRequest(BaseModel):
    """Placement problem submitted for optimization."""

    units: List[UnitSchema] = Field(description="Virtual machines to place")
    nodes: List[NodeSchema] = Field(description="Hosts available for placement")
    evolution: EvolutionParameters = Field(default_factory=EvolutionParameters)
    random_seed: Optional[int] = Field(default=None, description="Seed for a reproducible search")


class OptimizationResponse(BaseModel):
    """Best placement found."""

    assignments: Dict[int, int]
    active_node_count: int
    node_count: int
    fitness: float
    breakdown: Dict[str, float]
    generations: int
    evaluations: int
    history: List[Dict[str, Any]]


class ScenarioResponse(BaseModel):
    units: List[UnitSchema]
    nodes: List[NodeSchema]


@router.get("/scenarios/reference", response_model=ScenarioResponse)
def reference_scenario() -> Dict[str, Any]:
    """Return the reference datacenter (10 hosts, 20 virtual machines)."""
    units, nodes = create_reference_datacenter()
    return {
        "units": [unit.to_dict() for unit in units],
        "nodes": [node.to_dict() for node in nodes]
    }


@router.post("/optimize", response_model=OptimizationResponse)
def optimize(request: OptimizationRequest) -> Dict[str, Any]:
    """
    Run the placement genetic algorithm on the submitted problem.

    The search is CPU bound; FastAPI runs this handler in its worker
    thread pool.
    """
    _check_limits(request)

    try:
        units = [WorkloadUnit(**unit.model_dump()) for unit in request.units]
        nodes = [ResourceNode(**node.model_dump()) for node in request.nodes]
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    config = PlacementConfig(
        evolution=request.evolution,
        logging=LoggingConfig(metrics_export=False),
        random_seed=request.random_seed
    )

    with logfire.span("Optimize placement", units=len(units), nodes=len(nodes)):
        try:
            result = optimize_placement(units, nodes, config)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

        logfire.info(
            "Placement optimized",
            fitness=result.fitness,
            active_nodes=result.active_node_count,
            evaluations=result.evaluations
        )

    return result.to_dict()


def _check_limits(request: OptimizationRequest) -> None:
    if len(request.units) > settings.max_units_per_request:
        raise HTTPException(
            status_code=400,
            detail=f"Too many workload units ({len(request.units)} > {settings.max_units_per_request})"
        )
    if len(request.nodes) > settings.max_nodes_per_request:
        raise HTTPException(
            status_code=400,
            detail=f"Too many resource nodes ({len(request.nodes)} > {settings.max_nodes_per_request})"
        )
    if request.evolution.max_generations > settings.max_generations_per_request:
        raise HTTPException(
            status_code=400,
            detail=(
                f"Too many generations ({request.evolution.max_generations} > "
                f"{settings.max_generations_per_request})"
            )
        )
    if request.evolution.population_size > settings.max_population_per_request:
        raise HTTPException(
            status_code=400,
            detail=(
                f"Population too large ({request.evolution.population_size} > "
                f"{settings.max_population_per_request})"
            )
        )
