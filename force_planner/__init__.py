"""Top‑level package for the Force Structure Planner.

This file makes the directory a Python package and exposes
convenient names.  The primary modules are:

* ``ledger`` – the allocation ledger that keeps budgets, quantities and
  unit costs consistent against a global budget limit
* ``views`` – pandas projections of ledger state for charts and tables
* ``visualization`` – functions that generate Plotly figures
* ``dashboard`` – a Streamlit app that ties everything together

To run the dashboard from the command line you can execute:

```bash
streamlit run force_planner/dashboard.py
```

or ``python run_planner.py`` from the project root.
"""

from . import ledger  # noqa: F401  # re-exported for convenience
from . import views  # noqa: F401  # re-exported for convenience
from . import visualization  # noqa: F401  # re-exported for convenience
from .ledger import AllocationLedger, EditResult, LedgerEvent  # noqa: F401
# Streamlit may not be installed in all environments (e.g. a headless
# install used only for the ledger); fall back to ``None`` in that case.
try:
    from . import dashboard  # type: ignore  # noqa: F401
except ModuleNotFoundError:
    dashboard = None  # type: ignore


__all__ = ["ledger", "views", "visualization", "dashboard", "AllocationLedger", "EditResult", "LedgerEvent"]
