from staking.contracts.base import Contract
from staking.execution.module import export
from staking.logger import get_logger
from staking import config

log = get_logger('Currency')


def _valid_amount(amount):
    return isinstance(amount, int) and not isinstance(amount, bool) and amount >= 0


class Currency(Contract):
    """
    Fungible token with a fixed supply. Refusals never raise, they are logged and reported
    as False so callers decide whether a failed transfer matters.
    """
    def __init__(self, driver, name=config.CURRENCY_CONTRACT):
        super().__init__(name, driver)

        self.balances = self.hash('balances', default_value=0)
        self.allowances = self.hash('allowances', default_value=0)
        self.supply = self.variable('supply', default_value=0)

    def seed(self, balances: dict):
        assert self.supply.get() == 0, 'Currency has already been seeded!'

        for account, amount in balances.items():
            assert _valid_amount(amount), 'Seed balance for {} must be a non-negative integer.'.format(account)
            self.balances[account] = amount

        self.supply.set(sum(balances.values()))

    @export
    def balance_of(self, account):
        return self.balances[account]

    @export
    def total_supply(self):
        return self.supply.get()

    @export
    def allowance(self, owner, spender):
        return self.allowances[owner, spender]

    @export
    def approve(self, owner, spender, amount):
        if owner not in (self.ctx.caller, self.ctx.signer):
            log.warning('{} may not approve spending on behalf of {}'.format(self.ctx.caller, owner))
            return False

        if not _valid_amount(amount):
            log.warning('Invalid approval amount {!r}'.format(amount))
            return False

        self.allowances[owner, spender] = amount
        return True

    @export
    def transfer(self, to, amount):
        sender = self.ctx.caller

        if not _valid_amount(amount) or self.balances[sender] < amount:
            log.warning('Not enough coins to send {!r} from {} to {}'.format(amount, sender, to))
            return False

        self.balances[sender] -= amount
        self.balances[to] += amount
        return True

    @export
    def transfer_from(self, source, to, amount):
        spender = self.ctx.caller

        if not _valid_amount(amount):
            log.warning('Invalid transfer amount {!r}'.format(amount))
            return False

        if self.allowances[source, spender] < amount:
            log.warning('{} is not approved to spend {} of {}'.format(spender, amount, source))
            return False

        if self.balances[source] < amount:
            log.warning('Not enough coins to send {} from {} to {}'.format(amount, source, to))
            return False

        self.allowances[source, spender] -= amount
        self.balances[source] -= amount
        self.balances[to] += amount
        return True
