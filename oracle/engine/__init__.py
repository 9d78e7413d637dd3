from oracle.engine.daily_energy import DailyEnergyEngine, DailyReading
from oracle.engine.seed import birth_profile_key, daily_seed, int_seed

__all__ = [
    "DailyEnergyEngine",
    "DailyReading",
    "birth_profile_key",
    "daily_seed",
    "int_seed",
]
