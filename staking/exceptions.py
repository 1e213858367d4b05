class StakingError(Exception):
    """
    The base exception for the staking ledger. The fmt directive
    will be overloaded by the inheriting classes

    :ivar msg: The message associated with the error
    """
    fmt = 'An unspecified error occurred'

    def __init__(self, **kwargs):
        msg = self.fmt.format(**kwargs)
        Exception.__init__(self, msg)
        self.kwargs = kwargs


class InsufficientFunds(StakingError):
    """
    The caller tried to stake more tokens than it holds

    :ivar account: The staking account
    :ivar amount: The amount requested
    :ivar balance: The token balance of the account
    """
    fmt = "Insufficient funds: '{account}' holds {balance}, cannot stake {amount}"


class ExceedsClaimable(StakingError):
    fmt = "Exceeds current claimable: '{account}' can claim {claimable}, requested {amount}"


class NothingToClaim(StakingError):
    fmt = "No tokens to be claimed by '{account}'"


class NoStakeHistory(StakingError):
    """
    Queried an account that never staked. There is no meaningful
    zero answer for it.

    :ivar account: The account queried
    """
    fmt = "Account '{account}' has no stake history"


class StakeNotFound(StakingError):
    fmt = "Account '{account}' has no stake at index {index}"


class InvalidAmount(StakingError):
    fmt = "Amount must be a non-negative integer, got {amount!r}"


class ContractNotFound(StakingError):
    fmt = "Contract '{name}' is not installed"


class PrivateMethod(StakingError):
    fmt = "Function '{function}' of contract '{contract}' is not exported"


class DatabaseDriverNotFound(StakingError):
    """
    Could not find the specified database driver when
    looking for it

    :ivar driver: The name of the database driver the
                  the user attempted to load
    :ivar known_drivers: The list of known drivers
    """
    fmt = "Unknown database driver '{driver}', known drivers '{known_drivers}'"


class InvalidKey(StakingError):
    """
    A storage key component could not be used

    :ivar key: The offending key
    :ivar reason: What is wrong with it
    """
    fmt = "Invalid key {key!r}: {reason}"


class InvalidBlockNumber(StakingError):
    fmt = "Block number must be an integer, got {block_num!r}"
