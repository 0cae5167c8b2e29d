"""Configuration values for the tail-assignment planning core."""
import os
from pathlib import Path

# Solver connectivity. An empty base URL means the solver is not configured.
SOLVER_BASE_URL = os.getenv("SOLVER_BASE_URL", "")
SOLVER_CEILING_SEC = float(os.getenv("SOLVER_CEILING_SEC", "600"))
SOLVER_CONNECT_TIMEOUT_SEC = float(os.getenv("SOLVER_CONNECT_TIMEOUT_SEC", "10"))

# CSV repositories
DATA_DIR = Path(os.getenv("TAILPLAN_DATA_DIR", Path(__file__).resolve().parent / "data"))
CSV_DELIMITER = ";"

# Turnaround fallback when neither an airport override nor a type policy exists
DEFAULT_TAT_MINUTES = int(os.getenv("DEFAULT_TAT_MINUTES", "45"))

# Optimizer defaults
DEFAULT_TIME_LIMIT_SEC = 120
DEFAULT_MIP_GAP = 0.01
DEFAULT_CHAIN_BREAK_COST = 500.0
DEFAULT_OVERFLOW_COST = 10000.0
DEFAULT_TIGHT_TAT_PENALTY = 200.0
DEFAULT_SOFT_TAT_PENALTY = 50.0

LOG_LEVEL = os.getenv("TAILPLAN_LOG_LEVEL", "INFO").upper()

# Operator on whose behalf the CLI and HTTP surface run
OPERATOR_ID = os.getenv("OPERATOR_ID") or None
HOME_COUNTRY = os.getenv("HOME_COUNTRY") or None
