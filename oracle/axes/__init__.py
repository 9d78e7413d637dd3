from oracle.axes.axis_model import AXIS_NAMES, NEUTRAL_AXES, AxisVector
from oracle.axes.balancer import add_daily_volatility, balance
from oracle.axes.volatility import modulate

__all__ = [
    "AXIS_NAMES",
    "NEUTRAL_AXES",
    "AxisVector",
    "add_daily_volatility",
    "balance",
    "modulate",
]
