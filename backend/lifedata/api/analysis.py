"""
Analysis endpoints for life-data reliability analysis.

Provides endpoints for:
- Distribution parameter estimation (SRM, RRX, MLE)
- Reliability function curves for one or many models
- Best-distribution selection
- Fisher confidence bounds on the Weibull line
- Preventive maintenance optimization and Monte Carlo simulation
"""
from fastapi import APIRouter, HTTPException, status
from typing import List, Dict, Any
import logging
import math

from lifedata.config import get_settings
from lifedata.core.distributions import (
    DistributionFactory,
    WeibullParameters,
)
from lifedata.core.fitting import estimate_parameters, find_best_distribution
from lifedata.core.reliability import ReliabilityModel, calculate_reliability_data
from lifedata.core.confidence import calculate_fisher_confidence_bounds
from lifedata.core.weibull import summarize_weibull
from lifedata.core.maintenance import (
    optimize_preventive_maintenance,
    simulate_weibull_failures,
    MaintenanceOptimizationError
)
from lifedata.schemas.analysis import (
    EstimateRequest,
    ReliabilityRequest,
    BestFitRequest,
    ConfidenceBoundsRequest,
    MaintenanceOptimizeRequest,
    MonteCarloRequest
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analysis", tags=["analysis"])


# ==================== Estimation Endpoints ====================

@router.post("/estimate")
async def estimate(request: EstimateRequest) -> Dict[str, Any]:
    """
    Estimate distribution parameters from failure and suspension times.

    Returns the parameters (empty when there are no failures), the method
    that actually produced them, probability plot data and the
    log-likelihood. Weibull fits also carry B-lives, MTTF and the
    failure phase.
    """
    try:
        result = estimate_parameters(
            distribution=request.distribution,
            failure_times=request.failures_payload(),
            suspension_times=request.suspensions_payload(),
            method=request.method,
            is_grouped=request.is_grouped
        )
        response = result.to_dict()

        if isinstance(result.parameters, WeibullParameters):
            summary = summarize_weibull(result.parameters)
            if summary is not None:
                response["summary"] = {
                    "b10": summary.b10_life,
                    "b50": summary.b50_life,
                    "b63_2": summary.b63_life,
                    "mttf": summary.mttf if math.isfinite(summary.mttf) else None,
                    "failurePhase": summary.failure_phase.value
                }

        return response

    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except Exception as e:
        logger.error(f"Error estimating parameters: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Parameter estimation failed: {str(e)}"
        )


@router.post("/best-fit")
async def best_fit(request: BestFitRequest) -> Dict[str, Any]:
    """
    Fit every distribution family and rank them by log-likelihood.

    Without usable failures every family is listed without parameters
    and no best family is named.
    """
    try:
        result = find_best_distribution(request.failure_times, request.suspension_times)
        return result.to_dict()

    except Exception as e:
        logger.error(f"Error selecting best distribution: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Best-fit selection failed: {str(e)}"
        )


@router.get("/distributions")
async def get_available_distributions() -> List[Dict[str, Any]]:
    """List the supported distribution families with their parameters."""
    return [
        DistributionFactory.get_distribution_info(name)
        for name in DistributionFactory.list_distributions()
    ]


# ==================== Reliability Endpoints ====================

@router.post("/reliability")
async def reliability_curves(request: ReliabilityRequest) -> Dict[str, Any]:
    """
    Evaluate R(t), F(t), f(t) and λ(t) for several models on a shared grid.

    Models with an unknown distribution or invalid parameters yield null
    values in their column; other models are unaffected.
    """
    try:
        settings = get_settings()
        models = [
            ReliabilityModel(
                name=model.name,
                distribution=model.distribution,
                parameters=model.parameters,
                failure_times=model.failure_times,
                suspension_times=model.suspension_times
            )
            for model in request.models
        ]

        data = calculate_reliability_data(
            models,
            grid_points=request.grid_points or settings.grid_points,
            grid_extension=settings.grid_extension
        )
        return data.to_dict()

    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except Exception as e:
        logger.error(f"Error calculating reliability data: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Reliability calculation failed: {str(e)}"
        )


@router.post("/confidence-bounds")
async def confidence_bounds(request: ConfidenceBoundsRequest) -> Dict[str, Any]:
    """
    Fisher-matrix confidence bounds on the Weibull probability plot line.

    The confidence level may be given as a fraction (0.9) or a percentage (90).
    """
    try:
        settings = get_settings()
        level = request.confidence_level
        if level is None:
            level = settings.default_confidence_level

        bounds = calculate_fisher_confidence_bounds(request.failure_times, level)
        return bounds.to_dict()

    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except Exception as e:
        logger.error(f"Error calculating confidence bounds: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Confidence bound calculation failed: {str(e)}"
        )


# ==================== Maintenance Endpoints ====================

@router.post("/maintenance/optimize")
async def optimize_maintenance(request: MaintenanceOptimizeRequest) -> Dict[str, Any]:
    """
    Optimal preventive replacement interval for a Weibull model.

    Minimises the long-run cost per unit time of age replacement.
    """
    try:
        result = optimize_preventive_maintenance(
            beta=request.beta,
            eta=request.eta,
            cost_preventive=request.cost_preventive,
            cost_corrective=request.cost_corrective,
            steps=request.steps
        )
        return result.to_dict()

    except (ValueError, MaintenanceOptimizationError) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except Exception as e:
        logger.error(f"Error optimizing maintenance interval: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Maintenance optimization failed: {str(e)}"
        )


@router.post("/maintenance/simulate")
async def simulate_failures(request: MonteCarloRequest) -> Dict[str, Any]:
    """
    Monte Carlo simulation of Weibull failure times.

    Returns the simulated MTTF, the total failure cost and a histogram,
    plus every simulated time when include_failure_times is set.
    """
    try:
        settings = get_settings()
        if request.simulations > settings.monte_carlo_max_simulations:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"At most {settings.monte_carlo_max_simulations} simulations allowed"
            )

        result = simulate_weibull_failures(
            beta=request.beta,
            eta=request.eta,
            simulations=request.simulations,
            failure_cost=request.failure_cost,
            bin_count=request.bin_count,
            seed=request.seed
        )
        return result.to_dict(include_times=request.include_failure_times)

    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except Exception as e:
        logger.error(f"Error in Monte Carlo simulation: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Monte Carlo simulation failed: {str(e)}"
        )
