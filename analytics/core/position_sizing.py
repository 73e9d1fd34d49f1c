"""
Position Sizing and Cash-Flow Conversion

This module converts broker-reported trade P&L into the net dollar P&L the
account would have realised under a capital allocation policy. Sizing is a
sequential fold: with percentage sizing every stake depends on the equity
left by all earlier trades, so trades are always processed in timestamp order.
"""

from typing import Iterable, Iterator, List
import logging

from .interfaces import AnalysisConfig, CashFlow, PositionSizeType, Trade

logger = logging.getLogger(__name__)


class PositionSizer:
    """
    Sequential position sizer.

    Turns each trade into a CashFlow carrying the stake used, gross P&L,
    commission, net P&L and the equity before and after the trade.
    """

    def __init__(self,
                 initial_capital: float,
                 position_size_type: PositionSizeType = PositionSizeType.FIXED,
                 position_size: float = 100.0,
                 commission_rate: float = 0.0):
        """
        Initialize position sizer.

        Args:
            initial_capital: Starting account equity
            position_size_type: Fixed dollar stake or percentage of equity
            position_size: Dollars per trade (fixed) or percent of equity (percentage)
            commission_rate: Round-trip commission rate applied to the stake
        """
        self.initial_capital = initial_capital
        self.position_size_type = position_size_type
        self.position_size = position_size
        self.commission_rate = commission_rate

    @classmethod
    def from_config(cls, config: AnalysisConfig) -> "PositionSizer":
        return cls(initial_capital=config.initial_capital,
                   position_size_type=config.sizing,
                   position_size=config.position_size,
                   commission_rate=config.commission_rate)

    def calculate_stake(self, equity: float) -> float:
        """Stake committed to a trade given the equity before it."""
        if self.position_size_type == PositionSizeType.PERCENTAGE:
            return max(equity, 0.0) * self.position_size / 100.0
        return self.position_size

    def calculate_gross_pnl(self, trade: Trade, stake: float) -> float:
        """
        Gross dollar P&L of a trade at the given stake.

        A nonzero percentage P&L always wins and is applied to the stake.
        Without one, fixed sizing uses the reported dollar P&L while
        percentage sizing cannot rescale a dollar figure and books 0.
        """
        if trade.has_percent_pnl:
            return stake * trade.pnl_percent / 100.0
        if self.position_size_type == PositionSizeType.FIXED:
            return trade.pnl
        return 0.0

    def iter_cash_flows(self, trades: Iterable[Trade]) -> Iterator[CashFlow]:
        """Yield one CashFlow per trade, carrying equity forward."""
        equity = self.initial_capital
        for trade in trades:
            stake = self.calculate_stake(equity)
            gross_pnl = self.calculate_gross_pnl(trade, stake)
            commission = stake * self.commission_rate
            net_pnl = gross_pnl - commission

            flow = CashFlow(
                trade=trade,
                stake=stake,
                gross_pnl=gross_pnl,
                commission=commission,
                net_pnl=net_pnl,
                equity_before=equity,
                equity_after=equity + net_pnl,
            )
            equity = flow.equity_after
            yield flow

    def convert(self, trades: List[Trade]) -> List[CashFlow]:
        """
        Size every trade in chronological order.

        Args:
            trades: Trades sorted by ascending timestamp

        Returns:
            List of cash flows, one per trade
        """
        for previous, current in zip(trades, trades[1:]):
            if current.timestamp < previous.timestamp:
                raise ValueError("Trades must be sorted by ascending timestamp before sizing")

        flows = list(self.iter_cash_flows(trades))

        if flows:
            total_commission = sum(flow.commission for flow in flows)
            logger.info(f"Sized {len(flows)} trades ({self.position_size_type.value}), "
                        f"final equity {flows[-1].equity_after:.2f}, "
                        f"commission paid {total_commission:.2f}")
        return flows


def equity_trajectory(flows: List[CashFlow], initial_capital: float) -> List[float]:
    """Equity seeded by the initial capital followed by the equity after each trade."""
    return [initial_capital] + [flow.equity_after for flow in flows]
