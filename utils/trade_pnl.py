"""
P&L derivation for imported trades.

Imports only carry risk % and R:R, so profit is derived from the account
balance: a win earns risk * RR percent, a loss costs the risk percent.
"""

from typing import Optional


def calculate_trade_pnl(
    trade_outcome: str,
    risk_per_trade: Optional[float],
    risk_reward_ratio: Optional[float],
    break_even: bool,
    account_balance: Optional[float],
) -> dict[str, float]:
    """
    Compute P&L percentage and amount for one trade.

    Args:
        trade_outcome: Normalized outcome ("Win", "Lose", "Break-Even")
        risk_per_trade: Risk as percent of balance (1 = 1%)
        risk_reward_ratio: Reward per unit of risk
        break_even: Trade was closed at break even
        account_balance: Balance the percentages apply to

    Returns:
        {"pnl_percentage": float, "calculated_profit": float}
    """
    if not account_balance or break_even or trade_outcome == "Break-Even":
        return {"pnl_percentage": 0.0, "calculated_profit": 0.0}

    risk = float(risk_per_trade or 0)
    rr = float(risk_reward_ratio or 0)
    pnl_pct = -risk if trade_outcome == "Lose" else risk * rr

    return {
        "pnl_percentage": pnl_pct,
        "calculated_profit": (pnl_pct / 100) * account_balance,
    }
