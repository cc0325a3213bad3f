"""
Backtest configuration model.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from hashlib import sha256
import json

from ..analysis.cost import (
    CostModel,
    LinearBorrowingCostModel,
    LinearTransactionCostModel,
    ZeroCostModel,
)
from ..backtest.execution import (
    TradeExecutionModel,
    TradeOnCurrentCloseModel,
    TradeOnNextOpenModel,
)
from ..utils.numeric import NumFactory, get_factory
from .trade import TradeType


@dataclass
class ConfigHash:
    """Configuration hash for reproducibility."""
    hash_value: str
    timestamp: str

    @staticmethod
    def compute(config_dict: Dict[str, Any]) -> str:
        """Compute SHA256 hash of config."""
        json_str = json.dumps(config_dict, sort_keys=True, default=str)
        return sha256(json_str.encode()).hexdigest()


@dataclass
class BacktestConfig:
    """Settings of a backtest run."""
    num_backend: str = "decimal"
    maximum_bar_count: Optional[int] = None
    transaction_cost: Dict[str, Any] = field(default_factory=lambda: {"model": "zero", "fee": 0})
    holding_cost: Dict[str, Any] = field(default_factory=lambda: {"model": "zero", "fee": 0})
    execution_model: str = "current_close"
    amount: Any = 1
    trade_type: str = "BUY"
    data: Dict[str, Any] = field(default_factory=dict)
    logging: Dict[str, Any] = field(default_factory=dict)
    config_hash: Optional[ConfigHash] = None

    def __post_init__(self):
        if self.config_hash is None:
            combined = {
                'num_backend': self.num_backend,
                'maximum_bar_count': self.maximum_bar_count,
                'transaction_cost': self.transaction_cost,
                'holding_cost': self.holding_cost,
                'execution_model': self.execution_model,
                'amount': self.amount,
                'trade_type': self.trade_type,
                'data': self.data,
            }
            self.config_hash = ConfigHash(
                hash_value=ConfigHash.compute(combined),
                timestamp=datetime.now(timezone.utc).isoformat()
            )

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "BacktestConfig":
        """Build from a loaded ``backtest.json``; missing keys keep their defaults."""
        known = {k: v for k, v in config.items() if k in cls.__dataclass_fields__ and k != 'config_hash'}
        return cls(**known)

    def num_factory(self) -> NumFactory:
        return get_factory(self.num_backend)

    def transaction_cost_model(self) -> CostModel:
        model = self.transaction_cost.get("model", "zero")
        if model == "zero":
            return ZeroCostModel()
        if model == "linear":
            return LinearTransactionCostModel(self.transaction_cost.get("fee", 0))
        raise ValueError(f"Unknown transaction cost model: {model}")

    def holding_cost_model(self) -> CostModel:
        model = self.holding_cost.get("model", "zero")
        if model == "zero":
            return ZeroCostModel()
        if model == "linear_borrowing":
            return LinearBorrowingCostModel(self.holding_cost.get("fee", 0))
        raise ValueError(f"Unknown holding cost model: {model}")

    def trade_execution_model(self) -> TradeExecutionModel:
        """Trade execution model named by ``execution_model``."""
        if self.execution_model == "current_close":
            return TradeOnCurrentCloseModel()
        if self.execution_model == "next_open":
            return TradeOnNextOpenModel()
        raise ValueError(f"Unknown execution model: {self.execution_model}")

    def starting_type(self) -> TradeType:
        return TradeType(self.trade_type.upper())
