"""
Aggregate statistics of a trading record.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict

from ..utils.numeric import is_nan, is_negative, is_positive


@dataclass
class TradingRecordSummary:
    """Aggregated position statistics, in the record's numeric backend."""
    total_positions: int = 0
    winning_positions: int = 0
    losing_positions: int = 0
    win_rate: Any = 0
    net_profit: Any = 0
    gross_profit: Any = 0
    total_cost: Any = 0
    profit_factor: Any = 0
    best_position: Any = 0
    worst_position: Any = 0
    gross_return: Any = 1
    open_position: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly view; numbers rendered as strings to keep Decimal precision."""
        data = asdict(self)
        for key, value in data.items():
            if not isinstance(value, (bool, int)):
                data[key] = str(value)
        return data


def summarize(trading_record) -> TradingRecordSummary:
    """Compute aggregate statistics over the closed positions of ``trading_record``."""
    factory = trading_record.num_factory
    positions = trading_record.positions
    if not positions:
        return TradingRecordSummary(
            win_rate=factory.zero(),
            net_profit=factory.zero(),
            gross_profit=factory.zero(),
            total_cost=factory.zero(),
            profit_factor=factory.zero(),
            best_position=factory.zero(),
            worst_position=factory.zero(),
            gross_return=factory.one(),
            open_position=not trading_record.is_closed(),
        )

    profits = [p.get_profit() for p in positions]
    valid_profits = [p for p in profits if not is_nan(p)]
    wins = [p for p in valid_profits if is_positive(p)]
    losses = [-p for p in valid_profits if is_negative(p)]

    total_wins = sum(wins, factory.zero())
    total_losses = sum(losses, factory.zero())
    if total_losses > 0:
        profit_factor = total_wins / total_losses
    elif total_wins > 0:
        profit_factor = factory.num_of(float("inf"))
    else:
        profit_factor = factory.zero()

    gross_return = factory.one()
    for position in positions:
        gross_return = gross_return * position.get_gross_return()

    return TradingRecordSummary(
        total_positions=len(positions),
        winning_positions=len(wins),
        losing_positions=len(losses),
        win_rate=factory.num_of(len(wins)) / factory.num_of(len(positions)),
        net_profit=sum(profits, factory.zero()),
        gross_profit=sum((p.get_gross_profit() for p in positions), factory.zero()),
        total_cost=sum((p.get_position_cost() for p in positions), factory.zero()),
        profit_factor=profit_factor,
        best_position=max(valid_profits) if valid_profits else factory.nan(),
        worst_position=min(valid_profits) if valid_profits else factory.nan(),
        gross_return=gross_return,
        open_position=not trading_record.is_closed(),
    )
