from staking.contracts.base import Contract
from staking.execution.module import export
from staking.db.types import StakeEntry
from staking.exceptions import InsufficientFunds, ExceedsClaimable, NothingToClaim, NoStakeHistory, \
    StakeNotFound, InvalidAmount
from staking.logger import get_logger
from staking import curve
from staking import config

log = get_logger('Staking')


def _check_amount(amount):
    if not isinstance(amount, int) or isinstance(amount, bool) or amount < 0:
        raise InvalidAmount(amount=amount)


class Staking(Contract):
    """
    Ledger of time-locked deposits.

    Each account owns an ordered list of StakeEntry records, oldest first, stored under
    stakes:<account>. A missing list means the account never staked. Records leave the
    list the moment everything they hold has been paid out.

    The token contract is addressed by name and only ever asked to approve, move and
    report balances.
    """
    def __init__(self, driver, name=config.STAKING_CONTRACT, token=config.CURRENCY_CONTRACT,
                 staking_period=config.STAKING_PERIOD, tick_duration=config.TICK_DURATION,
                 balance_policy=config.BALANCE_POLICY_UNLOCKED):
        super().__init__(name, driver)

        curve.validate(staking_period, tick_duration)
        if balance_policy not in config.BALANCE_POLICIES:
            raise ValueError('Unknown balance policy {!r}, expected one of {}'.format(
                balance_policy, sorted(config.BALANCE_POLICIES))
            )

        self._token = token
        self._staking_period = staking_period
        self._tick_duration = tick_duration
        self._balance_policy = balance_policy

        self.stakes = self.hash('stakes')

    @property
    def token(self):
        return self._token

    @property
    def staking_period(self):
        return self._staking_period

    @property
    def tick_duration(self):
        return self._tick_duration

    @property
    def balance_policy(self):
        return self._balance_policy

    def _level(self, elapsed_ticks):
        return curve.unlock_level(elapsed_ticks, self._staking_period, self._tick_duration)

    def _unlocked(self, entry: StakeEntry):
        # What this entry may pay out right now on top of what it already paid. A tick older than
        # an earlier claim can put the curve below withdrawn, that entry has nothing to pay.
        level = self._level(self.now - entry.timestamp)
        return max(0, curve.unlocked_amount(level, entry.amount) - entry.withdrawn)

    def _claimable(self, entry: StakeEntry):
        if self._balance_policy == config.BALANCE_POLICY_LEGACY:
            # Deployed ledgers feed a derived value back through the curve and sum the levels
            return self.get_unlock_level(since_tick=entry.timestamp * entry.amount // config.MAX_UNLOCK_LEVEL - entry.withdrawn)
        return self._unlocked(entry)

    def _entries(self, account):
        entries = self.stakes[account]
        if entries is None:
            raise NoStakeHistory(account=account)
        return list(entries)

    def _entry(self, account, index):
        entries = self._entries(account)
        if not isinstance(index, int) or not 0 <= index < len(entries):
            raise StakeNotFound(account=account, index=index)
        return entries[index]

    def _reconcile(self, entries, remaining=None):
        """
        Walks entries oldest first, moving unlocked value into each entry's withdrawn amount.
        With remaining set the walk stops once that much is covered, otherwise every entry is
        drained of what it has unlocked. Exhausted entries are removed in place and the index
        is not advanced, since the next entry has moved into that slot.

        Returns the total reconciled.
        """
        reconciled = 0
        i = 0

        while i < len(entries) and (remaining is None or remaining > 0):
            entry = entries[i]
            unlocked = self._unlocked(entry)

            if remaining is not None and unlocked > remaining:
                entries[i] = entry.withdraw(remaining)
                reconciled += remaining
                remaining = 0
                break

            entry = entry.withdraw(unlocked)
            reconciled += unlocked
            if remaining is not None:
                remaining -= unlocked

            if entry.exhausted:
                del entries[i]
            else:
                entries[i] = entry
                i += 1

        return reconciled

    def _pay_out(self, account, amount):
        token = self.import_contract(self._token)
        token.approve(owner=self.ctx.this, spender=self.ctx.this, amount=amount)
        token.transfer_from(source=self.ctx.this, to=account, amount=amount)

    @export
    def stake(self, amount):
        _check_amount(amount)

        account = self.ctx.caller
        token = self.import_contract(self._token)

        balance = token.balance_of(account=account)
        if balance < amount:
            raise InsufficientFunds(account=account, amount=amount, balance=balance)

        entries = list(self.stakes[account] or [])
        entries.append(StakeEntry(amount=amount, timestamp=self.now))
        self.stakes[account] = entries

        token.approve(owner=account, spender=self.ctx.this, amount=amount)
        token.transfer_from(source=account, to=self.ctx.this, amount=amount)

        log.info('{} staked {} at tick {}'.format(account, amount, self.now))

    @export
    def get_unlock_level(self, since_tick):
        return self._level(self.now - since_tick)

    @export
    def get_claimable_balance(self, account):
        return sum(self._claimable(entry) for entry in self._entries(account))

    @export
    def claim(self, amount):
        _check_amount(amount)

        account = self.ctx.caller

        claimable = self.get_claimable_balance(account=account)
        if claimable < amount:
            raise ExceedsClaimable(account=account, amount=amount, claimable=claimable)

        entries = self._entries(account)
        reconciled = self._reconcile(entries, remaining=amount)
        self.stakes[account] = entries

        if reconciled != amount:
            log.debug('Claim of {} by {} reconciled {} against stakes'.format(amount, account, reconciled))

        self._pay_out(account, amount)

        log.info('{} claimed {} at tick {}'.format(account, amount, self.now))
        return amount

    @export
    def claim_all(self):
        account = self.ctx.caller

        claimable = self.get_claimable_balance(account=account)
        if claimable <= 0:
            raise NothingToClaim(account=account)

        entries = self._entries(account)
        self._reconcile(entries)
        self.stakes[account] = entries

        self._pay_out(account, claimable)

        log.info('{} claimed all {} at tick {}'.format(account, claimable, self.now))
        return claimable

    @export
    def get_staked_timestamp(self, account, index=0):
        return self._entry(account, index).timestamp

    @export
    def get_staked_amount(self, account, index=0):
        return self._entry(account, index).amount

    @export
    def get_withdrawn_amount(self, account, index=0):
        return self._entry(account, index).withdrawn

    @export
    def get_stakes(self, account):
        return [entry.to_dict() for entry in self._entries(account)]

    @export
    def get_erc20_totalsupply(self):
        return self.import_contract(self._token).total_supply()

    @export
    def get_erc20_balance(self, account):
        return self.import_contract(self._token).balance_of(account=account)
