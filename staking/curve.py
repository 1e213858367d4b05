"""Unlock curve shared by every stake.

Progress is measured in fifths of the staking period. The first fifth unlocks
nothing, each of the next five unlocks one more tenth starting at half the
deposit, and anything past that jumps straight to the full deposit.
"""
from staking import config


def validate(staking_period, tick_duration):
    if staking_period < config.UNLOCK_STEPS:
        raise ValueError('staking_period must be at least {}, got {}'.format(config.UNLOCK_STEPS, staking_period))
    if tick_duration <= 0:
        raise ValueError('tick_duration must be positive, got {}'.format(tick_duration))


def clocks(elapsed_ticks: int, staking_period: int, tick_duration: int) -> int:
    return (elapsed_ticks * tick_duration) // (staking_period // config.UNLOCK_STEPS)


def unlock_level(elapsed_ticks: int,
                 staking_period: int = config.STAKING_PERIOD,
                 tick_duration: int = config.TICK_DURATION) -> int:
    if elapsed_ticks < 0:
        return 0

    c = clocks(elapsed_ticks, staking_period, tick_duration)

    if c > config.UNLOCK_STEPS:
        return config.MAX_UNLOCK_LEVEL
    elif c == 0:
        return 0
    return config.UNLOCK_OFFSET + c


def unlocked_amount(level: int, amount: int) -> int:
    return level * amount // config.MAX_UNLOCK_LEVEL
