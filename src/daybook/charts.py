"""
Chart functions for visualizing simulation histories.

All chart functions return (figure, tidy_dataframe_used) for consistency.
"""

from __future__ import annotations

from collections.abc import Sequence

import pandas as pd

from .core.history import History

# Plotly is an optional extra
try:
    import plotly.express as px
    import plotly.graph_objects as go

    PLOTLY_AVAILABLE = True
except ImportError:
    PLOTLY_AVAILABLE = False


def _check_plotly() -> None:
    """Check if Plotly is available and raise helpful error if not."""
    if not PLOTLY_AVAILABLE:
        raise ImportError(
            "Plotly is required for chart functions. Install with:\n"
            "pip install plotly\n"
            "or\n"
            "pip install 'daybook[viz]'"
        )


def tidy_balances(history: History, accounts: Sequence[str] | None = None) -> pd.DataFrame:
    """
    Long-format balances: one row per (date, account) with a float ``balance``.

    An empty history gives an empty frame with the same columns.

    Raises:
        KeyError: If a requested account does not appear in the history
    """
    if len(history) == 0:
        return pd.DataFrame(
            {
                "date": pd.Series(dtype="datetime64[ns]"),
                "account": pd.Series(dtype=object),
                "balance": pd.Series(dtype=float),
            }
        )
    frame = history.to_frame()
    if accounts is not None:
        missing = [name for name in accounts if name not in frame.columns]
        if missing:
            raise KeyError(f"unknown accounts: {', '.join(missing)}")
        frame = frame[list(accounts)]
    tidy = frame.astype(float).reset_index().melt(
        id_vars="date", var_name="account", value_name="balance"
    )
    return tidy


def account_balances_chart(
    history: History,
    accounts: Sequence[str] | None = None,
    currency: str = "",
) -> tuple[go.Figure, pd.DataFrame]:
    """
    Plot daily balances of one or more accounts.

    **Args:**
        history: History from :meth:`Simulation.run`
        accounts: Accounts to plot (default: every account)
        currency: Display symbol used in the axis title

    **Returns:**
        Tuple of (plotly_figure, tidy_dataframe_used)

    **Example:**
        ```python
        history = Simulation.from_file("household.yaml").run(730)
        fig, data = account_balances_chart(history, ["main", "mortgage"], "£")
        save_chart(fig, "balances.html")
        ```
    """
    _check_plotly()

    tidy = tidy_balances(history, accounts)
    axis = f"Balance ({currency})" if currency else "Balance"
    fig = px.line(
        tidy,
        x="date",
        y="balance",
        color="account",
        title="Account Balances Over Time",
        labels={"balance": axis, "date": "Date"},
    )

    fig.update_layout(hovermode="x unified", legend_title="Account")

    return fig, tidy


def save_chart(fig: go.Figure, filename: str, format: str = "html") -> None:
    """
    Save chart to file.

    Args:
        fig: Plotly figure
        filename: Output filename
        format: Output format ('html', 'png', 'pdf', 'svg')
    """
    _check_plotly()

    if format == "html":
        fig.write_html(filename)
    elif format in {"png", "pdf", "svg"}:
        fig.write_image(filename, format=format)
    else:
        raise ValueError(f"Unsupported format: {format}")
