"""Monte Carlo GBM simulation calibrated from a price series."""
from .config import SimulationConfig
from .engine import MonteCarloGBM, SimulationResult, simulate_gbm, run_monte_carlo
from .calibrate import calibrate_gbm, CalibrationResult, GBMParameters
