"""Top-level package for the budget insights engine.

Analytics over a household ledger against the 50/30/20 rule. The
primary modules are:

* ``summary`` – budget summary for one month or one year
* ``trends`` – monthly and yearly trend series
* ``breakdown`` – spending by category
* ``goals`` – savings goal timeline
* ``projections`` – "if this continues" yearly projection
* ``narrative`` – short plain-language summaries
* ``migrations`` and ``storage`` – the persisted JSON store

A text report for one period can be printed with:

```bash
python scripts/budget_report.py --period 2024-01
```
"""

from .breakdown import calculate_category_breakdown, get_top_categories  # noqa: F401
from .goals import calculate_average_monthly_cash_balance, calculate_goal_timeline  # noqa: F401
from .migrations import CURRENT_DATA_VERSION, migrate_store  # noqa: F401
from .narrative import generate_monthly_summary, generate_yearly_summary  # noqa: F401
from .projections import calculate_projections, get_analysis_months  # noqa: F401
from .summary import calculate_budget_summary  # noqa: F401
from .trends import calculate_monthly_trends, calculate_yearly_trends  # noqa: F401

__version__ = '0.5.0'
